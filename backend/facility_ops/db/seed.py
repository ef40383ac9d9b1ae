"""
Seed script: initial roster, one month of schedules, activity feed and
notifications. Each collection is only seeded while it is empty, and
everything is written in a single transaction.

Usage:
    python -m facility_ops.db.seed
"""

import asyncio
import datetime as dt
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.logging import setup_logging
from facility_ops.db.models import ActivityLog, Employee, Notification, WorkSchedule
from facility_ops.db.session import AsyncSessionLocal
from facility_ops.services.schedule import build_month_records, team_workers

logger = logging.getLogger(__name__)

INITIAL_EMPLOYEES: list[dict] = [
    {
        "name": "Minsu Jeon",
        "role": "Pest Control Manager",
        "team": "A",
        "shift": "A",
        "status": "On-Duty",
        "monthly_hours": 184,
        "total_hours": 240,
        "time_info": "07:22 AM",
        "time_label": "Checked in",
        "email": "minsu.jeon@company.com",
        "phone": "010-1234-5678",
        "department": "Pest Control",
        "join_date": dt.date(2020, 3, 1),
    },
    {
        "name": "Jimin Kim",
        "role": "Pest Control Manager",
        "team": "B",
        "shift": "B",
        "status": "Off-Duty",
        "monthly_hours": 168,
        "total_hours": 240,
        "time_info": "Tomorrow 07:30 AM",
        "time_label": "Next shift",
        "email": "jimin.kim@company.com",
        "phone": "010-9876-5432",
        "department": "Pest Control",
        "join_date": dt.date(2021, 5, 15),
    },
]

INITIAL_NOTIFICATIONS: list[dict] = [
    {
        "title": "Urgent facility inspection",
        "message": "Flood alarm in the B2 machine room. Please check immediately.",
        "type": "alert",
        "category": "Urgent",
    },
    {
        "title": "System maintenance",
        "message": "The server will be down for two hours from midnight.",
        "type": "warning",
        "category": "System",
        "is_read": True,
    },
]


async def _is_empty(session: AsyncSession, model) -> bool:
    count = await session.scalar(select(func.count()).select_from(model))
    return not count


async def seed_initial_data(session: AsyncSession, today: dt.date | None = None) -> dict[str, int]:
    today = today or dt.date.today()
    seeded: dict[str, int] = {}

    if await _is_empty(session, Employee):
        session.add_all(Employee(**data) for data in INITIAL_EMPLOYEES)
        await session.flush()
        seeded["employees"] = len(INITIAL_EMPLOYEES)

    if await _is_empty(session, WorkSchedule):
        records = build_month_records(
            today.year, today.month, await team_workers(session), today
        )
        session.add_all(records)
        seeded["work_schedules"] = len(records)

    if await _is_empty(session, ActivityLog):
        now = dt.datetime.now(dt.timezone.utc)
        workers = await team_workers(session)
        logs = [
            ActivityLog(user=workers["A"], action="Checked in", type="login",
                        timestamp=now - dt.timedelta(hours=1)),
            ActivityLog(user=workers["B"], action="Checked out", type="logout",
                        timestamp=now - dt.timedelta(minutes=50)),
            ActivityLog(user="Administrator", action="Edited schedule", type="edit",
                        timestamp=now - dt.timedelta(days=1)),
        ]
        session.add_all(logs)
        seeded["activity_logs"] = len(logs)

    if await _is_empty(session, Notification):
        session.add_all(Notification(**data) for data in INITIAL_NOTIFICATIONS)
        seeded["notifications"] = len(INITIAL_NOTIFICATIONS)

    if seeded:
        await session.commit()
        logger.info("Seeded initial data: %s", seeded)
    else:
        logger.info("All collections already populated, nothing to seed")
    return seeded


async def main():
    setup_logging()
    async with AsyncSessionLocal() as session:
        await seed_initial_data(session)


if __name__ == "__main__":
    asyncio.run(main())
