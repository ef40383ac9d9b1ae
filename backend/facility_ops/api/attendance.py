import datetime as dt
import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.api.errors import write_guard
from facility_ops.api.streaming import snapshot_stream
from facility_ops.db.session import get_db
from facility_ops.schemas.attendance import (
    AttendanceRecordResponse,
    AttendanceReport,
    ImportResultResponse,
)
from facility_ops.services import attendance
from facility_ops.services.attendance_aggregator import aggregate, monthly_hours_by_employee
from facility_ops.services.excel_export import XLSX_MEDIA_TYPE, attendance_to_xlsx
from facility_ops.services.live import ATTENDANCE_RECORDS

logger = logging.getLogger(__name__)

router = APIRouter()

_ALLOWED_EXTENSIONS = {".xlsx", ".xls"}


def _file_extension(filename: str | None) -> str:
    if not filename:
        return ""
    idx = filename.rfind(".")
    return filename[idx:].lower() if idx != -1 else ""


def _require_month_pair(year: int | None, month: int | None) -> None:
    if (year is None) != (month is None):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Pass both 'year' and 'month', or neither",
        )


@router.get(
    "/records",
    response_model=list[AttendanceRecordResponse],
    summary="Attendance records, newest first",
)
async def list_attendance(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    search: str | None = Query(default=None, description="Filter by employee name"),
    db: AsyncSession = Depends(get_db),
) -> list[AttendanceRecordResponse]:
    _require_month_pair(year, month)
    records = await attendance.list_records(db, year, month, search)
    return [AttendanceRecordResponse.model_validate(r) for r in records]


@router.get(
    "/report",
    response_model=AttendanceReport,
    summary="Summary, weekday hours and department ratios",
)
async def attendance_report(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> AttendanceReport:
    _require_month_pair(year, month)
    return aggregate(await attendance.list_records(db, year, month))


@router.get(
    "/monthly-hours",
    summary="Worked hours per employee for one month",
)
async def monthly_hours(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> dict[str, int]:
    today = dt.date.today()
    year = year or today.year
    month = month or today.month
    records = await attendance.list_records(db, year, month)
    return monthly_hours_by_employee(records, year, month)


@router.post(
    "/import",
    response_model=ImportResultResponse,
    summary="Import attendance rows from an Excel file",
)
async def import_attendance(
    file: UploadFile,
    db: AsyncSession = Depends(get_db),
) -> ImportResultResponse:
    ext = _file_extension(file.filename)
    logger.info("Attendance upload: '%s' (extension '%s')", file.filename, ext)

    if ext not in _ALLOWED_EXTENSIONS:
        logger.warning("Rejected file '%s': unsupported extension '%s'", file.filename, ext)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '{ext}'. Allowed: {', '.join(sorted(_ALLOWED_EXTENSIONS))}",
        )

    content = await file.read()
    async with write_guard(db, f"importing '{file.filename}'"):
        result = await attendance.import_excel(db, io.BytesIO(content), file.filename or "unknown")
        if result.inserted_count:
            await attendance.publish_snapshot(db)
    return result


@router.get("/export", summary="Download attendance records as .xlsx")
async def export_attendance(
    year: int | None = Query(default=None, ge=2000, le=2100),
    month: int | None = Query(default=None, ge=1, le=12),
    db: AsyncSession = Depends(get_db),
) -> StreamingResponse:
    _require_month_pair(year, month)
    records = await attendance.list_records(db, year, month)
    suffix = f"{year:04d}_{month:02d}" if year and month else "all"
    return StreamingResponse(
        io.BytesIO(attendance_to_xlsx(records)),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="attendance_{suffix}.xlsx"'},
    )


@router.get("/stream", summary="Live attendance snapshots (SSE)")
async def stream_attendance(request: Request, db: AsyncSession = Depends(get_db)) -> StreamingResponse:
    records = await attendance.list_records(db)
    return snapshot_stream(
        request,
        ATTENDANCE_RECORDS,
        [AttendanceRecordResponse.model_validate(r) for r in records],
    )
