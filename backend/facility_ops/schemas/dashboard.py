from typing import Literal

from pydantic import BaseModel

from facility_ops.schemas.employee import EmployeeResponse
from facility_ops.schemas.notification import ActivityLogResponse
from facility_ops.schemas.schedule import CalendarGrid, ShiftAssignment


class DashboardEmployee(BaseModel):
    employee: EmployeeResponse
    shift_label: Literal["current", "next"] | None
    month_hours: int


class DashboardResponse(BaseModel):
    today: ShiftAssignment
    next: ShiftAssignment
    employees: list[DashboardEmployee]
    calendar: CalendarGrid
    recent_activity: list[ActivityLogResponse]
