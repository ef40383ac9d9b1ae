"""
Notifications and activity feed.

Tests:
  - test_list_and_unread_filter : newest first, unread count
  - test_mark_read / read_all   : read flags and live snapshot
  - test_delete                 : removal, unknown id -> 404
  - test_activity_feed          : newest first with limit
"""

from __future__ import annotations

import datetime as dt

from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.db.models import ActivityLog, Notification
from facility_ops.services.live import NOTIFICATIONS, hub


async def _seed(db: AsyncSession) -> list[Notification]:
    base = dt.datetime(2026, 3, 2, 9, 0, tzinfo=dt.timezone.utc)
    items = [
        Notification(title="Flood alarm", message="B2 machine room", type="alert",
                     category="Urgent", created_at=base),
        Notification(title="Maintenance", message="Server down at midnight", type="warning",
                     category="System", is_read=True, created_at=base + dt.timedelta(hours=1)),
        Notification(title="New schedule", message="April roster published", type="info",
                     category="Schedule", created_at=base + dt.timedelta(hours=2)),
    ]
    db.add_all(items)
    await db.commit()
    return items


class TestNotifications:
    async def test_list_and_unread_filter(self, client: AsyncClient, db: AsyncSession) -> None:
        await _seed(db)

        data = (await client.get("/api/notifications/")).json()
        assert data["total"] == 3
        assert data["unread"] == 2
        assert [n["title"] for n in data["items"]] == ["New schedule", "Maintenance", "Flood alarm"]

        data = (await client.get("/api/notifications/", params={"filter": "unread"})).json()
        assert [n["title"] for n in data["items"]] == ["New schedule", "Flood alarm"]

    async def test_mark_read(self, client: AsyncClient, db: AsyncSession) -> None:
        items = await _seed(db)
        received: list[list] = []
        hub.subscribe(NOTIFICATIONS, received.append)

        resp = await client.post(f"/api/notifications/{items[0].id}/read")
        assert resp.status_code == 200
        assert resp.json()["is_read"] is True
        assert len(received) == 1

        data = (await client.get("/api/notifications/")).json()
        assert data["unread"] == 1

    async def test_read_all(self, client: AsyncClient, db: AsyncSession) -> None:
        await _seed(db)
        resp = await client.post("/api/notifications/read-all")
        assert resp.json() == {"updated": 2}
        assert (await client.get("/api/notifications/")).json()["unread"] == 0

    async def test_delete(self, client: AsyncClient, db: AsyncSession) -> None:
        items = await _seed(db)
        assert (await client.delete(f"/api/notifications/{items[1].id}")).status_code == 204
        assert (await client.get("/api/notifications/")).json()["total"] == 2
        assert (await client.delete(f"/api/notifications/{items[1].id}")).status_code == 404

    async def test_activity_feed(self, client: AsyncClient, db: AsyncSession) -> None:
        base = dt.datetime(2026, 3, 2, 9, 0, tzinfo=dt.timezone.utc)
        db.add_all(
            ActivityLog(user="Minsu Jeon", action=f"Action {i}", type="edit",
                        timestamp=base + dt.timedelta(minutes=i))
            for i in range(4)
        )
        await db.commit()

        resp = await client.get("/api/notifications/activity", params={"limit": 2})
        assert [a["action"] for a in resp.json()] == ["Action 3", "Action 2"]
