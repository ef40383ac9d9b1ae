import datetime as dt
import io
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.api.errors import to_http, write_guard
from facility_ops.api.streaming import snapshot_stream
from facility_ops.core.exceptions import DomainError
from facility_ops.db.session import get_db
from facility_ops.schemas.worklog import (
    PhotoUploadResponse,
    WorkLogCreate,
    WorkLogOptions,
    WorkLogResponse,
    WorkLogStats,
    WorkLogStatusChange,
)
from facility_ops.services import worklog_workflow
from facility_ops.services.excel_export import XLSX_MEDIA_TYPE, worklogs_to_xlsx
from facility_ops.services.live import WORK_LOGS
from facility_ops.services.photo_storage import LocalPhotoStorage, get_storage, make_key

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/",
    response_model=WorkLogResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a work-log entry (always starts Pending)",
)
async def create_worklog(
    body: WorkLogCreate,
    db: AsyncSession = Depends(get_db),
) -> WorkLogResponse:
    async with write_guard(db, "creating a work log"):
        entry = await worklog_workflow.create_entry(db, body)
        await worklog_workflow.publish_snapshot(db)
    return WorkLogResponse.model_validate(entry)


@router.get(
    "/",
    response_model=list[WorkLogResponse],
    summary="List work-log entries, optionally for one day",
)
async def list_worklogs(
    date: dt.date | None = Query(default=None, description="ISO date YYYY-MM-DD"),
    db: AsyncSession = Depends(get_db),
) -> list[WorkLogResponse]:
    entries = await worklog_workflow.list_entries(db, date)
    return [WorkLogResponse.model_validate(e) for e in entries]


@router.get(
    "/pending",
    response_model=list[WorkLogResponse],
    summary="Entries awaiting handover: not completed, or urgent",
)
async def list_pending(
    date: dt.date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> list[WorkLogResponse]:
    entries = worklog_workflow.derive_pending(await worklog_workflow.list_entries(db, date))
    return [WorkLogResponse.model_validate(e) for e in entries]


@router.get("/stats", response_model=WorkLogStats, summary="Counters for the daily log")
async def worklog_stats(
    date: dt.date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> WorkLogStats:
    return worklog_workflow.summarize(await worklog_workflow.list_entries(db, date))


@router.get("/options", response_model=WorkLogOptions, summary="Form choices")
async def worklog_options() -> WorkLogOptions:
    return WorkLogOptions(
        task_types=worklog_workflow.TASK_TYPES,
        categories=worklog_workflow.CATEGORIES,
        priorities=worklog_workflow.PRIORITIES,
        locations=worklog_workflow.location_options(),
    )


@router.get("/export", summary="Download work logs as .xlsx")
async def export_worklogs(
    date: dt.date | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
) -> StreamingResponse:
    entries = await worklog_workflow.list_entries(db, date)
    content = worklogs_to_xlsx(entries)
    filename = f"work_logs_{date.isoformat() if date else 'all'}.xlsx"
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/stream", summary="Live work-log snapshots (SSE)")
async def stream_worklogs(request: Request, db: AsyncSession = Depends(get_db)) -> StreamingResponse:
    entries = await worklog_workflow.list_entries(db)
    return snapshot_stream(request, WORK_LOGS, [WorkLogResponse.model_validate(e) for e in entries])


@router.patch(
    "/{entry_id}/status",
    response_model=WorkLogResponse,
    summary="Move an entry forward (Pending -> In Progress -> Completed)",
)
async def change_worklog_status(
    entry_id: int,
    body: WorkLogStatusChange,
    db: AsyncSession = Depends(get_db),
) -> WorkLogResponse:
    async with write_guard(db, f"changing status of work log {entry_id}"):
        entry = await worklog_workflow.change_status(db, entry_id, body.status)
        await worklog_workflow.publish_snapshot(db)
    return WorkLogResponse.model_validate(entry)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a work-log entry",
)
async def delete_worklog(entry_id: int, db: AsyncSession = Depends(get_db)) -> None:
    async with write_guard(db, f"deleting work log {entry_id}"):
        await worklog_workflow.delete_entry(db, entry_id)
        await worklog_workflow.publish_snapshot(db)


@router.post(
    "/photos",
    response_model=PhotoUploadResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a work-log photo and get its public URL",
)
async def upload_photo(
    file: UploadFile,
    photo_storage: LocalPhotoStorage = Depends(get_storage),
) -> PhotoUploadResponse:
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported content type '{file.content_type}', expected an image",
        )
    key = make_key("work_logs", file.filename)
    try:
        url = await photo_storage.put(key, await file.read())
    except DomainError as exc:
        raise to_http(exc) from exc
    return PhotoUploadResponse(key=key, url=url)
