from typing import Literal

from fastapi import APIRouter, Depends, Query, Request, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.api.errors import write_guard
from facility_ops.api.streaming import snapshot_stream
from facility_ops.db.session import get_db
from facility_ops.schemas.notification import (
    ActivityLogResponse,
    NotificationList,
    NotificationResponse,
)
from facility_ops.services import notifications
from facility_ops.services.live import ACTIVITY_LOGS, NOTIFICATIONS

router = APIRouter()


@router.get("/", response_model=NotificationList, summary="Notifications, newest first")
async def list_notifications(
    filter: Literal["all", "unread"] = Query(default="all"),
    db: AsyncSession = Depends(get_db),
) -> NotificationList:
    items = await notifications.list_notifications(db, unread_only=filter == "unread")
    return NotificationList(
        total=len(items),
        unread=await notifications.unread_count(db),
        items=[NotificationResponse.model_validate(n) for n in items],
    )


@router.get("/stream", summary="Live notification snapshots (SSE)")
async def stream_notifications(request: Request, db: AsyncSession = Depends(get_db)) -> StreamingResponse:
    items = await notifications.list_notifications(db)
    return snapshot_stream(request, NOTIFICATIONS, [NotificationResponse.model_validate(n) for n in items])


@router.get(
    "/activity",
    response_model=list[ActivityLogResponse],
    summary="Recent roster and shift activity",
)
async def recent_activity(
    limit: int = Query(default=20, ge=1, le=200),
    db: AsyncSession = Depends(get_db),
) -> list[ActivityLogResponse]:
    items = await notifications.recent_activity(db, limit)
    return [ActivityLogResponse.model_validate(a) for a in items]


@router.get("/activity/stream", summary="Live activity feed snapshots (SSE)")
async def stream_activity(request: Request, db: AsyncSession = Depends(get_db)) -> StreamingResponse:
    items = await notifications.recent_activity(db, limit=200)
    return snapshot_stream(request, ACTIVITY_LOGS, [ActivityLogResponse.model_validate(a) for a in items])


@router.post("/read-all", summary="Mark every notification as read")
async def mark_all_read(db: AsyncSession = Depends(get_db)) -> dict:
    async with write_guard(db, "marking notifications read"):
        updated = await notifications.mark_all_read(db)
        await notifications.publish_snapshot(db)
    return {"updated": updated}


@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(notification_id: int, db: AsyncSession = Depends(get_db)) -> NotificationResponse:
    async with write_guard(db, f"marking notification {notification_id} read"):
        item = await notifications.mark_read(db, notification_id)
        await notifications.publish_snapshot(db)
    return NotificationResponse.model_validate(item)


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(notification_id: int, db: AsyncSession = Depends(get_db)) -> None:
    async with write_guard(db, f"deleting notification {notification_id}"):
        await notifications.delete_notification(db, notification_id)
        await notifications.publish_snapshot(db)
