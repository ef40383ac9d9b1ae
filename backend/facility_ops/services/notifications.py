from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.exceptions import NotFoundError
from facility_ops.db.models import ActivityLog, Notification
from facility_ops.schemas.notification import ActivityLogResponse, NotificationResponse
from facility_ops.services.live import ACTIVITY_LOGS, NOTIFICATIONS, hub


async def list_notifications(db: AsyncSession, unread_only: bool = False) -> list[Notification]:
    stmt = select(Notification)
    if unread_only:
        stmt = stmt.where(Notification.is_read == False)  # noqa: E712
    stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc())
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def unread_count(db: AsyncSession) -> int:
    count = await db.scalar(
        select(func.count()).select_from(Notification).where(Notification.is_read == False)  # noqa: E712
    )
    return int(count or 0)


async def get_notification(db: AsyncSession, notification_id: int) -> Notification:
    result = await db.execute(select(Notification).where(Notification.id == notification_id))
    item = result.scalar_one_or_none()
    if item is None:
        raise NotFoundError(f"Notification {notification_id} not found")
    return item


async def mark_read(db: AsyncSession, notification_id: int) -> Notification:
    item = await get_notification(db, notification_id)
    item.is_read = True
    await db.commit()
    await db.refresh(item)
    return item


async def mark_all_read(db: AsyncSession) -> int:
    result = await db.execute(
        update(Notification).where(Notification.is_read == False).values(is_read=True)  # noqa: E712
    )
    await db.commit()
    return result.rowcount or 0


async def delete_notification(db: AsyncSession, notification_id: int) -> None:
    item = await get_notification(db, notification_id)
    await db.delete(item)
    await db.commit()


async def publish_snapshot(db: AsyncSession) -> None:
    items = await list_notifications(db)
    await hub.publish(NOTIFICATIONS, [NotificationResponse.model_validate(n) for n in items])


async def recent_activity(db: AsyncSession, limit: int = 20) -> list[ActivityLog]:
    result = await db.execute(
        select(ActivityLog).order_by(ActivityLog.timestamp.desc(), ActivityLog.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def publish_activity_snapshot(db: AsyncSession) -> None:
    items = await recent_activity(db, limit=200)
    await hub.publish(ACTIVITY_LOGS, [ActivityLogResponse.model_validate(a) for a in items])
