import datetime as dt
from typing import Literal

from pydantic import BaseModel

NotificationType = Literal["alert", "info", "success", "warning"]


class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    type: NotificationType
    category: str
    is_read: bool
    created_at: dt.datetime

    model_config = {"from_attributes": True}


class NotificationList(BaseModel):
    total: int
    unread: int
    items: list[NotificationResponse]


class ActivityLogResponse(BaseModel):
    id: int
    user: str
    action: str
    type: Literal["login", "logout", "edit"]
    timestamp: dt.datetime

    model_config = {"from_attributes": True}
