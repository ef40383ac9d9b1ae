import datetime as dt
from typing import Literal

from pydantic import BaseModel

Team = Literal["A", "B"]
ScheduleStatus = Literal["Scheduled", "InProgress", "Completed"]


class WorkScheduleResponse(BaseModel):
    id: int
    date: dt.date
    team: Team
    worker_name: str
    status: ScheduleStatus

    model_config = {"from_attributes": True}


class ShiftAssignment(BaseModel):
    date: dt.date
    team: Team
    worker_name: str
    status: ScheduleStatus | None = None
    source: Literal["persisted", "derived"]


class CalendarCell(BaseModel):
    date: dt.date
    day: int
    is_current_month: bool
    timing: Literal["past", "current", "future"] | None = None
    shift: ShiftAssignment | None = None


class CalendarGrid(BaseModel):
    year: int
    month: int
    leading_days: int
    rows: list[list[CalendarCell]]


class SeedResult(BaseModel):
    inserted: int
