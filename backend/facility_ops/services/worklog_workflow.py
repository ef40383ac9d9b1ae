"""
Daily work-log lifecycle.

Status moves forward only: Pending -> In Progress -> Completed, with
Pending -> Completed allowed directly. Re-applying the current status is
a no-op so two clients racing to complete the same entry both succeed.
"""

import datetime as dt
import logging
from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.exceptions import InvalidTransitionError, NotFoundError
from facility_ops.db.models import WorkLog
from facility_ops.schemas.worklog import WorkLogCreate, WorkLogResponse, WorkLogStats
from facility_ops.services.live import WORK_LOGS, hub

logger = logging.getLogger(__name__)

STATUS_RANK: dict[str, int] = {"Pending": 0, "In Progress": 1, "Completed": 2}

TASK_TYPES: list[str] = ["Pest", "Facility"]
PRIORITIES: list[str] = ["Normal", "Important", "Urgent"]
CATEGORIES: list[str] = [
    "Routine Inspection",
    "Emergency Pest Control",
    "Facility Repair",
    "Customer Request",
]


def location_options() -> list[str]:
    """Building levels from the lowest basement up to the top floor."""
    basements = [f"Basement {level} (B{level})" for level in range(6, 0, -1)]
    floors = [f"Floor {level} ({level}F)" for level in range(1, 21)]
    return basements + floors


def check_transition(current: str, requested: str) -> bool:
    """
    Validate a status change. Returns False when nothing needs to change,
    True for a forward move, raises InvalidTransitionError otherwise.
    """
    if current == requested:
        return False
    if STATUS_RANK[requested] < STATUS_RANK[current]:
        raise InvalidTransitionError(current, requested)
    return True


def is_pending(entry: Any) -> bool:
    # Urgent entries stay on the handover list even once completed
    return entry.status != "Completed" or entry.priority == "Urgent"


def derive_pending(entries: Iterable[Any]) -> list[Any]:
    return [entry for entry in entries if is_pending(entry)]


def summarize(entries: Iterable[Any]) -> WorkLogStats:
    entries = list(entries)
    return WorkLogStats(
        total=len(entries),
        pending=sum(1 for e in entries if e.status == "Pending"),
        completed=sum(1 for e in entries if e.status == "Completed"),
        urgent=sum(1 for e in entries if e.priority == "Urgent"),
    )


async def list_entries(db: AsyncSession, day: dt.date | None = None) -> list[WorkLog]:
    stmt = select(WorkLog)
    if day is not None:
        stmt = stmt.where(WorkLog.date == day)
    stmt = stmt.order_by(WorkLog.time, WorkLog.id)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_entry(db: AsyncSession, entry_id: int) -> WorkLog:
    result = await db.execute(select(WorkLog).where(WorkLog.id == entry_id))
    entry = result.scalar_one_or_none()
    if entry is None:
        raise NotFoundError(f"Work log {entry_id} not found")
    return entry


async def create_entry(
    db: AsyncSession, body: WorkLogCreate, now: dt.datetime | None = None
) -> WorkLog:
    now = now or dt.datetime.now()
    entry = WorkLog(
        date=body.date or now.date(),
        time=body.time or now.strftime("%H:%M"),
        task_type=body.task_type,
        category=body.category,
        details=body.details,
        location=body.location,
        priority=body.priority,
        status="Pending",
        photo_url=body.photo_url,
    )
    db.add(entry)
    await db.commit()
    await db.refresh(entry)
    logger.info(
        "Work log created: id=%s type=%s priority=%s location='%s'",
        entry.id, entry.task_type, entry.priority, entry.location,
    )
    return entry


async def change_status(db: AsyncSession, entry_id: int, new_status: str) -> WorkLog:
    entry = await get_entry(db, entry_id)
    if not check_transition(entry.status, new_status):
        logger.debug("Work log %s already '%s', nothing to do", entry_id, new_status)
        return entry
    previous = entry.status
    entry.status = new_status
    await db.commit()
    await db.refresh(entry)
    logger.info("Work log %s: '%s' -> '%s'", entry_id, previous, new_status)
    return entry


async def delete_entry(db: AsyncSession, entry_id: int) -> None:
    entry = await get_entry(db, entry_id)
    await db.delete(entry)
    await db.commit()
    logger.info("Work log %s deleted", entry_id)


async def publish_snapshot(db: AsyncSession) -> None:
    entries = await list_entries(db)
    await hub.publish(WORK_LOGS, [WorkLogResponse.model_validate(e) for e in entries])
