import datetime as dt

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.api.errors import write_guard
from facility_ops.api.streaming import snapshot_stream
from facility_ops.db.session import get_db
from facility_ops.schemas.schedule import (
    CalendarGrid,
    SeedResult,
    ShiftAssignment,
    WorkScheduleResponse,
)
from facility_ops.services import schedule
from facility_ops.services.live import WORK_SCHEDULES

router = APIRouter()


@router.get(
    "/",
    response_model=list[WorkScheduleResponse],
    summary="Persisted schedule records, optionally within a date range",
)
async def list_schedules(
    start: dt.date | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    end: dt.date | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
) -> list[WorkScheduleResponse]:
    records = await schedule.load_schedules(db, start, end)
    return [WorkScheduleResponse.model_validate(r) for r in records.values()]


@router.get(
    "/day/{day}",
    response_model=ShiftAssignment,
    summary="Team on duty for a date (persisted record or alternation rule)",
)
async def shift_on_day(day: dt.date, db: AsyncSession = Depends(get_db)) -> ShiftAssignment:
    return await schedule.shift_for_date(db, day)


@router.get(
    "/calendar",
    response_model=CalendarGrid,
    summary="Sunday-first month grid with the team for each day",
)
async def month_calendar(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> CalendarGrid:
    today = dt.date.today()
    year = year or today.year
    month = month or today.month
    persisted = await schedule.load_month(db, year, month)
    return schedule.calendar_grid(year, month, persisted, today)


@router.post(
    "/seed",
    response_model=SeedResult,
    status_code=status.HTTP_201_CREATED,
    summary="Fill an empty schedule collection with one month of shifts",
)
async def seed_schedules(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> SeedResult:
    today = dt.date.today()
    async with write_guard(db, "seeding schedules"):
        inserted = await schedule.seed_month(db, year or today.year, month or today.month, today)
        if inserted:
            await schedule.publish_snapshot(db)
    return SeedResult(inserted=inserted)


@router.get("/stream", summary="Live schedule snapshots (SSE)")
async def stream_schedules(request: Request, db: AsyncSession = Depends(get_db)) -> StreamingResponse:
    records = await schedule.load_schedules(db)
    return snapshot_stream(
        request,
        WORK_SCHEDULES,
        [WorkScheduleResponse.model_validate(r) for r in records.values()],
    )
