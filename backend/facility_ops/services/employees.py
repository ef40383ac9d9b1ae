import logging
import uuid

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.exceptions import NotFoundError
from facility_ops.db.models import ActivityLog, Employee
from facility_ops.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from facility_ops.services import notifications, roster_matcher
from facility_ops.services.live import EMPLOYEES, hub

logger = logging.getLogger(__name__)

ADMIN_ACTOR = "Administrator"


def _matches_filter(emp: Employee, value: str) -> bool:
    # Filter tabs mix departments, team names and shift labels such as "A조"
    return (
        emp.team == value
        or emp.department == value
        or emp.shift == value
        or f"{emp.shift}조" == value
    )


async def list_employees(
    db: AsyncSession, team_filter: str | None = None, search: str | None = None
) -> list[Employee]:
    result = await db.execute(select(Employee).order_by(Employee.name))
    roster = list(result.scalars().all())
    if team_filter and team_filter != "All":
        roster = [emp for emp in roster if _matches_filter(emp, team_filter)]
    if search:
        roster = roster_matcher.search_employees(search, roster)
    return roster


async def get_employee(db: AsyncSession, employee_id: uuid.UUID) -> Employee:
    result = await db.execute(select(Employee).where(Employee.id == employee_id))
    emp = result.scalar_one_or_none()
    if emp is None:
        raise NotFoundError(f"Employee {employee_id} not found")
    return emp


def _record_activity(db: AsyncSession, action: str) -> None:
    db.add(ActivityLog(user=ADMIN_ACTOR, action=action, type="edit"))


async def create_employee(db: AsyncSession, body: EmployeeCreate) -> Employee:
    emp = Employee(**body.model_dump())
    db.add(emp)
    _record_activity(db, f"Added employee {emp.name}")
    await db.commit()
    await db.refresh(emp)
    logger.info("Employee created: id=%s name='%s' shift=%s", emp.id, emp.name, emp.shift)
    return emp


async def update_employee(
    db: AsyncSession, employee_id: uuid.UUID, body: EmployeeUpdate
) -> Employee:
    emp = await get_employee(db, employee_id)
    changes = body.model_dump(exclude_none=True)
    for name, value in changes.items():
        setattr(emp, name, value)
    _record_activity(db, f"Updated employee {emp.name}")
    await db.commit()
    await db.refresh(emp)
    logger.info("Employee %s updated: %s", employee_id, ", ".join(sorted(changes)) or "no fields")
    return emp


async def delete_employee(db: AsyncSession, employee_id: uuid.UUID) -> None:
    emp = await get_employee(db, employee_id)
    await db.delete(emp)
    _record_activity(db, f"Removed employee {emp.name}")
    await db.commit()
    logger.info("Employee %s deleted", employee_id)


async def publish_snapshot(db: AsyncSession) -> None:
    roster = await list_employees(db)
    await hub.publish(EMPLOYEES, [EmployeeResponse.model_validate(e) for e in roster])
    # Roster changes always append to the activity feed
    await notifications.publish_activity_snapshot(db)
