"""
Attendance collection access and the spreadsheet import.

Attendance rows come from the external time clock; this service only
appends them (import) and reads them back for reports.
"""

import calendar
import datetime as dt
import logging
from typing import IO

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.db.models import AttendanceRecord, ImportHistory
from facility_ops.schemas.attendance import AttendanceRecordResponse, ImportResultResponse
from facility_ops.services import roster_matcher
from facility_ops.services.excel_parser import parse_attendance_excel
from facility_ops.services.live import ATTENDANCE_RECORDS, hub

logger = logging.getLogger(__name__)


def month_bounds(year: int, month: int) -> tuple[dt.date, dt.date]:
    return dt.date(year, month, 1), dt.date(year, month, calendar.monthrange(year, month)[1])


async def list_records(
    db: AsyncSession,
    year: int | None = None,
    month: int | None = None,
    search: str | None = None,
) -> list[AttendanceRecord]:
    stmt = select(AttendanceRecord)
    if year is not None and month is not None:
        start, end = month_bounds(year, month)
        stmt = stmt.where(AttendanceRecord.date.between(start, end))
    if search:
        stmt = stmt.where(AttendanceRecord.employee_name.ilike(f"%{search.strip()}%"))
    stmt = stmt.order_by(AttendanceRecord.date.desc(), AttendanceRecord.employee_name)
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def import_excel(db: AsyncSession, file: IO[bytes], filename: str) -> ImportResultResponse:
    records, errors = parse_attendance_excel(file)
    total = len(records) + len(errors)
    inserted = 0
    skipped = 0

    if records:
        roster = await roster_matcher.load_roster(db)
        name_cache: dict = {}

        existing_result = await db.execute(
            select(AttendanceRecord.employee_name, AttendanceRecord.date)
        )
        seen: set[tuple[str, dt.date]] = {(n, d) for n, d in existing_result.all()}

        for rec in records:
            name = roster_matcher.clean_name(rec.employee_name)
            department = rec.department
            emp = roster_matcher.match_employee(name, roster, name_cache)
            if emp is not None:
                name = emp.name
                department = department or emp.department

            key = (name, rec.date)
            if key in seen:
                skipped += 1
                continue
            seen.add(key)

            db.add(
                AttendanceRecord(
                    employee_name=name,
                    department=department,
                    date=rec.date,
                    check_in=rec.check_in,
                    check_out=rec.check_out,
                    total_hours=rec.total_hours,
                    status=rec.status,
                )
            )
            inserted += 1

        if skipped:
            logger.info("Duplicates in '%s': %d row(s) already stored", filename, skipped)

    error_count = len(errors)
    if inserted == 0 and total > 0:
        import_status = "failed"
    elif error_count > 0 or skipped > 0:
        import_status = "partial"
    else:
        import_status = "success"

    logger.info(
        "Import finished [%s]: status=%s, total=%d, inserted=%d, duplicates=%d, errors=%d",
        filename, import_status, total, inserted, skipped, error_count,
    )

    db.add(
        ImportHistory(
            filename=filename,
            status=import_status,
            logs={
                "total": total,
                "inserted": inserted,
                "skipped": skipped,
                "errors": errors[:100],
            },
        )
    )
    await db.commit()

    return ImportResultResponse(
        filename=filename,
        total=total,
        inserted_count=inserted,
        skipped=skipped,
        error_count=error_count,
        errors=errors,
        status=import_status,
    )


async def publish_snapshot(db: AsyncSession) -> None:
    records = await list_records(db)
    await hub.publish(
        ATTENDANCE_RECORDS, [AttendanceRecordResponse.model_validate(r) for r in records]
    )
