import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field, field_validator

TaskType = Literal["Pest", "Facility"]
Priority = Literal["Normal", "Important", "Urgent"]
WorkStatus = Literal["Pending", "In Progress", "Completed"]


class WorkLogCreate(BaseModel):
    task_type: TaskType = "Pest"
    date: dt.date | None = None
    time: str | None = Field(default=None, pattern=r"^\d{1,2}:\d{2}$")
    location: str
    category: str = "Routine Inspection"
    priority: Priority = "Normal"
    details: str
    photo_url: str | None = None
    # Accepted for compatibility with older clients; new entries always start Pending
    status: WorkStatus | None = None

    @field_validator("details", "location")
    @classmethod
    def not_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Field must not be empty")
        return v.strip()

    @field_validator("time")
    @classmethod
    def zero_padded_time(cls, v: str | None) -> str | None:
        if v is None:
            return v
        hours, minutes = (int(part) for part in v.split(":"))
        if hours > 23 or minutes > 59:
            raise ValueError("Time must be a valid HH:MM")
        # Stored as text and sorted lexically
        return f"{hours:02d}:{minutes:02d}"

    @field_validator("photo_url")
    @classmethod
    def blank_photo_is_none(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class WorkLogStatusChange(BaseModel):
    status: WorkStatus


class WorkLogResponse(BaseModel):
    id: int
    date: dt.date
    time: str
    task_type: TaskType
    category: str
    details: str
    location: str
    priority: Priority
    status: WorkStatus
    has_photo: bool
    photo_url: str | None

    model_config = {"from_attributes": True}


class WorkLogStats(BaseModel):
    total: int
    pending: int
    completed: int
    urgent: int


class WorkLogOptions(BaseModel):
    task_types: list[str]
    categories: list[str]
    priorities: list[str]
    locations: list[str]


class PhotoUploadResponse(BaseModel):
    key: str
    url: str
