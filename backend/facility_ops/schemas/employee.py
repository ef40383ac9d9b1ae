import datetime as dt
import re
import uuid
from typing import Literal

from pydantic import BaseModel, field_validator

_PHONE_RE = re.compile(r"^\d{2,3}-\d{3,4}-\d{4}$")
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

Shift = Literal["A", "B"]
DutyStatus = Literal["On-Duty", "Off-Duty"]


def _check_phone(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Phone is required")
    if not _PHONE_RE.match(v):
        raise ValueError("Phone must look like 010-1234-5678")
    return v


def _check_email(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("Email is required")
    if not _EMAIL_RE.match(v):
        raise ValueError("Email address is not valid")
    return v


class EmployeeCreate(BaseModel):
    name: str
    role: str
    team: str = "A"
    shift: Shift = "A"
    status: DutyStatus = "Off-Duty"
    department: str | None = None
    email: str
    phone: str
    join_date: dt.date
    avatar_url: str | None = None
    monthly_hours: int = 0
    total_hours: int = 240
    time_info: str = "-"
    time_label: str = "Standby"

    @field_validator("name", "role")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str) -> str:
        return _check_phone(v)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str) -> str:
        return _check_email(v)


class EmployeeUpdate(BaseModel):
    name: str | None = None
    role: str | None = None
    team: str | None = None
    shift: Shift | None = None
    status: DutyStatus | None = None
    department: str | None = None
    email: str | None = None
    phone: str | None = None
    join_date: dt.date | None = None
    avatar_url: str | None = None
    monthly_hours: int | None = None
    total_hours: int | None = None
    time_info: str | None = None
    time_label: str | None = None

    @field_validator("name", "role")
    @classmethod
    def not_empty(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip() if v is not None else v

    @field_validator("phone")
    @classmethod
    def valid_phone(cls, v: str | None) -> str | None:
        return _check_phone(v) if v is not None else v

    @field_validator("email")
    @classmethod
    def valid_email(cls, v: str | None) -> str | None:
        return _check_email(v) if v is not None else v


class EmployeeResponse(BaseModel):
    id: uuid.UUID
    name: str
    role: str
    team: str
    shift: Shift
    status: DutyStatus
    department: str | None
    email: str | None
    phone: str | None
    join_date: dt.date | None
    avatar_url: str | None
    monthly_hours: int
    total_hours: int
    time_info: str
    time_label: str

    model_config = {"from_attributes": True}
