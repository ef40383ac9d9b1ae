import datetime as dt
from typing import Literal

from pydantic import BaseModel, field_validator

AttendanceStatus = Literal["Normal", "Late", "Overtime", "Leave"]


class AttendanceRecordIn(BaseModel):
    employee_name: str
    department: str | None = None
    date: dt.date
    check_in: str = "-"
    check_out: str = "-"
    total_hours: str = "-"
    status: AttendanceStatus = "Normal"

    @field_validator("employee_name")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()

    @field_validator("department")
    @classmethod
    def blank_department_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v.strip()


class AttendanceRecordResponse(BaseModel):
    id: int
    employee_name: str
    department: str | None
    date: dt.date
    check_in: str
    check_out: str
    total_hours: str
    status: AttendanceStatus

    model_config = {"from_attributes": True}


class AttendanceSummary(BaseModel):
    total_hours: int
    late_count: int
    overtime_hours: int
    leave_count: int


class WeekdayHours(BaseModel):
    day: str
    hours: int


class DepartmentRatio(BaseModel):
    name: str
    ratio: int


class AttendanceReport(BaseModel):
    summary: AttendanceSummary
    weekly: list[WeekdayHours]
    departments: list[DepartmentRatio]


class ImportResultResponse(BaseModel):
    filename: str
    total: int
    inserted_count: int
    skipped: int
    error_count: int
    errors: list[str]
    status: Literal["success", "partial", "failed"]
