import datetime as dt

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.db.session import get_db
from facility_ops.schemas.dashboard import DashboardEmployee, DashboardResponse
from facility_ops.schemas.employee import EmployeeResponse
from facility_ops.schemas.notification import ActivityLogResponse
from facility_ops.services import attendance, employees, notifications, schedule
from facility_ops.services.attendance_aggregator import monthly_hours_by_employee

router = APIRouter()

_RECENT_ACTIVITY = 5


@router.get(
    "/",
    response_model=DashboardResponse,
    summary="Today's and tomorrow's shift, roster hours, calendar and activity",
)
async def get_dashboard(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> DashboardResponse:
    today = dt.date.today()
    tomorrow = today + dt.timedelta(days=1)
    year = year or today.year
    month = month or today.month

    persisted = await schedule.load_schedules(db, today, tomorrow)
    today_shift = schedule.shift_for_day(today, persisted)
    next_shift = schedule.shift_for_day(tomorrow, persisted)

    hours = monthly_hours_by_employee(
        await attendance.list_records(db, today.year, today.month), today.year, today.month
    )
    roster = []
    for emp in await employees.list_employees(db):
        if emp.shift == today_shift.team:
            label = "current"
        elif emp.shift == next_shift.team:
            label = "next"
        else:
            label = None
        roster.append(
            DashboardEmployee(
                employee=EmployeeResponse.model_validate(emp),
                shift_label=label,
                month_hours=hours.get(emp.name, 0),
            )
        )

    grid = schedule.calendar_grid(year, month, await schedule.load_month(db, year, month), today)

    activity = [
        ActivityLogResponse.model_validate(a)
        for a in await notifications.recent_activity(db, _RECENT_ACTIVITY)
    ]

    return DashboardResponse(
        today=today_shift,
        next=next_shift,
        employees=roster,
        calendar=grid,
        recent_activity=activity,
    )
