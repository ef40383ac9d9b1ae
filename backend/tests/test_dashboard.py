"""
Dashboard composition and startup seed data.

Tests:
  - test_dashboard_shifts_and_labels : today/next shift and roster labels
  - test_dashboard_recent_activity   : five newest entries
  - test_seed_initial_data_once      : seeding only fills empty collections
"""

from __future__ import annotations

import datetime as dt

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.db.models import ActivityLog, Employee, Notification, WorkSchedule
from facility_ops.db.seed import seed_initial_data
from facility_ops.services.schedule import shift_for_day


class TestDashboard:
    async def test_dashboard_shifts_and_labels(
        self, client: AsyncClient, roster: list[Employee]
    ) -> None:
        today = dt.date.today()
        resp = await client.get("/api/dashboard/")
        assert resp.status_code == 200, resp.text
        data = resp.json()

        expected_today = shift_for_day(today)
        assert data["today"]["team"] == expected_today.team
        assert data["next"]["date"] == (today + dt.timedelta(days=1)).isoformat()

        labels = {e["employee"]["name"]: e["shift_label"] for e in data["employees"]}
        on_duty = "Minsu Jeon" if expected_today.team == "A" else "Jimin Kim"
        assert labels[on_duty] == "current"
        assert all(e["month_hours"] == 0 for e in data["employees"])

        assert (data["calendar"]["year"], data["calendar"]["month"]) == (today.year, today.month)

    async def test_dashboard_recent_activity(self, client: AsyncClient, db: AsyncSession) -> None:
        base = dt.datetime(2026, 3, 2, 9, 0, tzinfo=dt.timezone.utc)
        db.add_all(
            ActivityLog(user="Administrator", action=f"Edit {i}", type="edit",
                        timestamp=base + dt.timedelta(minutes=i))
            for i in range(7)
        )
        await db.commit()

        data = (await client.get("/api/dashboard/")).json()
        assert [a["action"] for a in data["recent_activity"]] == [
            "Edit 6", "Edit 5", "Edit 4", "Edit 3", "Edit 2",
        ]


class TestSeed:
    async def test_seed_initial_data_once(self, db: AsyncSession) -> None:
        today = dt.date(2026, 3, 15)
        seeded = await seed_initial_data(db, today)
        assert seeded == {
            "employees": 2,
            "work_schedules": 31,
            "activity_logs": 3,
            "notifications": 2,
        }

        schedule = await db.scalar(select(WorkSchedule).where(WorkSchedule.date == today))
        assert schedule.status == "InProgress"
        assert schedule.worker_name == "Jimin Kim"

        assert await seed_initial_data(db, today) == {}
        assert await db.scalar(select(func.count()).select_from(Employee)) == 2
        assert await db.scalar(select(func.count()).select_from(Notification)) == 2
