"""
Shift schedule derivation and the monthly calendar grid.

Two teams alternate full days: even day-of-month is team A, odd is team B.
A persisted schedule record for a date always wins over the derived rule.
The dashboard calendar and the schedule screen both go through
``shift_for_day`` so they can never disagree.
"""

import calendar
import datetime as dt
import logging
from collections.abc import Mapping

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.config import settings
from facility_ops.db.models import Employee, WorkSchedule
from facility_ops.schemas.schedule import (
    CalendarCell,
    CalendarGrid,
    ShiftAssignment,
    WorkScheduleResponse,
)
from facility_ops.services.live import WORK_SCHEDULES, hub

logger = logging.getLogger(__name__)

_GRID_COLUMNS = 7


def team_for_day(day: dt.date) -> str:
    return "A" if day.day % 2 == 0 else "B"


def derive_shift(day: dt.date) -> ShiftAssignment:
    team = team_for_day(day)
    worker = settings.TEAM_A_WORKER if team == "A" else settings.TEAM_B_WORKER
    return ShiftAssignment(date=day, team=team, worker_name=worker, source="derived")


def shift_for_day(
    day: dt.date, persisted: Mapping[dt.date, WorkSchedule] | None = None
) -> ShiftAssignment:
    record = persisted.get(day) if persisted else None
    if record is None:
        return derive_shift(day)
    return ShiftAssignment(
        date=day,
        team=record.team,
        worker_name=record.worker_name,
        status=record.status,
        source="persisted",
    )


def leading_cell_count(year: int, month: int) -> int:
    """Cells before day 1 in a Sunday-first week."""
    return (dt.date(year, month, 1).weekday() + 1) % 7


def row_count(year: int, month: int) -> int:
    cells_needed = leading_cell_count(year, month) + calendar.monthrange(year, month)[1]
    return 6 if cells_needed > 35 else 5


def _timing(day: dt.date, today: dt.date) -> str:
    if day < today:
        return "past"
    if day == today:
        return "current"
    return "future"


def calendar_grid(
    year: int,
    month: int,
    persisted: Mapping[dt.date, WorkSchedule] | None = None,
    today: dt.date | None = None,
) -> CalendarGrid:
    today = today or dt.date.today()
    first = dt.date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]
    leading = leading_cell_count(year, month)
    rows_total = row_count(year, month)

    cells: list[CalendarCell] = []
    prev_last = first - dt.timedelta(days=1)
    for i in range(leading):
        day = prev_last - dt.timedelta(days=leading - 1 - i)
        cells.append(CalendarCell(date=day, day=day.day, is_current_month=False))

    for d in range(1, days_in_month + 1):
        day = dt.date(year, month, d)
        cells.append(
            CalendarCell(
                date=day,
                day=d,
                is_current_month=True,
                timing=_timing(day, today),
                shift=shift_for_day(day, persisted),
            )
        )

    next_first = first + dt.timedelta(days=days_in_month)
    for i in range(rows_total * _GRID_COLUMNS - len(cells)):
        day = next_first + dt.timedelta(days=i)
        cells.append(CalendarCell(date=day, day=day.day, is_current_month=False))

    rows = [
        cells[start : start + _GRID_COLUMNS]
        for start in range(0, len(cells), _GRID_COLUMNS)
    ]
    return CalendarGrid(year=year, month=month, leading_days=leading, rows=rows)


async def load_schedules(
    db: AsyncSession, start: dt.date | None = None, end: dt.date | None = None
) -> dict[dt.date, WorkSchedule]:
    stmt = select(WorkSchedule)
    if start is not None:
        stmt = stmt.where(WorkSchedule.date >= start)
    if end is not None:
        stmt = stmt.where(WorkSchedule.date <= end)
    result = await db.execute(stmt.order_by(WorkSchedule.date))
    return {s.date: s for s in result.scalars().all()}


async def load_month(db: AsyncSession, year: int, month: int) -> dict[dt.date, WorkSchedule]:
    last = calendar.monthrange(year, month)[1]
    return await load_schedules(db, dt.date(year, month, 1), dt.date(year, month, last))


async def shift_for_date(db: AsyncSession, day: dt.date) -> ShiftAssignment:
    return shift_for_day(day, await load_schedules(db, day, day))


async def team_workers(db: AsyncSession) -> dict[str, str]:
    workers = {"A": settings.TEAM_A_WORKER, "B": settings.TEAM_B_WORKER}
    result = await db.execute(select(Employee).order_by(Employee.name))
    staffed: set[str] = set()
    for emp in result.scalars().all():
        # First roster member of each shift staffs that team
        if emp.shift not in staffed:
            workers[emp.shift] = emp.name
            staffed.add(emp.shift)
    return workers


def build_month_records(
    year: int, month: int, workers: Mapping[str, str], today: dt.date
) -> list[WorkSchedule]:
    records = []
    for d in range(1, calendar.monthrange(year, month)[1] + 1):
        day = dt.date(year, month, d)
        team = team_for_day(day)
        if day < today:
            status = "Completed"
        elif day == today:
            status = "InProgress"
        else:
            status = "Scheduled"
        records.append(
            WorkSchedule(date=day, team=team, worker_name=workers[team], status=status)
        )
    return records


async def seed_month(
    db: AsyncSession, year: int, month: int, today: dt.date | None = None
) -> int:
    """
    Write one schedule record per day of the month, but only into an empty
    collection. Returns the number of records inserted.
    """
    today = today or dt.date.today()
    existing = await db.scalar(select(func.count()).select_from(WorkSchedule))
    if existing:
        logger.info("Schedules already present (%d), seeding skipped", existing)
        return 0

    records = build_month_records(year, month, await team_workers(db), today)

    db.add_all(records)
    try:
        await db.commit()
    except IntegrityError:
        # Another process seeded between the emptiness check and this write
        await db.rollback()
        logger.warning("Concurrent schedule seed detected for %04d-%02d", year, month)
        return 0

    logger.info("Seeded %d schedules for %04d-%02d", len(records), year, month)
    return len(records)


async def publish_snapshot(db: AsyncSession) -> None:
    schedules = await load_schedules(db)
    await hub.publish(
        WORK_SCHEDULES,
        [WorkScheduleResponse.model_validate(s) for s in schedules.values()],
    )
