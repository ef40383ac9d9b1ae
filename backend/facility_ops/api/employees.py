import logging
import uuid

from fastapi import APIRouter, Depends, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.api.errors import to_http, write_guard
from facility_ops.api.streaming import snapshot_stream
from facility_ops.core.exceptions import DomainError
from facility_ops.db.session import get_db
from facility_ops.schemas.employee import EmployeeCreate, EmployeeResponse, EmployeeUpdate
from facility_ops.services import employees
from facility_ops.services.live import EMPLOYEES
from facility_ops.services.photo_storage import LocalPhotoStorage, get_storage, make_key

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/",
    response_model=list[EmployeeResponse],
    summary="Roster with optional team filter and fuzzy search",
)
async def list_employees(
    filter: str | None = Query(
        default=None, description="'All', a department, a team, or a shift label such as 'A조'"
    ),
    search: str | None = Query(default=None, description="Name or department"),
    db: AsyncSession = Depends(get_db),
) -> list[EmployeeResponse]:
    roster = await employees.list_employees(db, filter, search)
    return [EmployeeResponse.model_validate(e) for e in roster]


@router.get("/stream", summary="Live roster snapshots (SSE)")
async def stream_employees(request: Request, db: AsyncSession = Depends(get_db)) -> StreamingResponse:
    roster = await employees.list_employees(db)
    return snapshot_stream(request, EMPLOYEES, [EmployeeResponse.model_validate(e) for e in roster])


@router.get("/{employee_id}", response_model=EmployeeResponse)
async def get_employee(employee_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> EmployeeResponse:
    try:
        emp = await employees.get_employee(db, employee_id)
    except DomainError as exc:
        raise to_http(exc) from exc
    return EmployeeResponse.model_validate(emp)


@router.post(
    "/",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an employee to the roster",
)
async def create_employee(
    body: EmployeeCreate,
    db: AsyncSession = Depends(get_db),
) -> EmployeeResponse:
    async with write_guard(db, "creating an employee"):
        emp = await employees.create_employee(db, body)
        await employees.publish_snapshot(db)
    return EmployeeResponse.model_validate(emp)


@router.patch("/{employee_id}", response_model=EmployeeResponse)
async def update_employee(
    employee_id: uuid.UUID,
    body: EmployeeUpdate,
    db: AsyncSession = Depends(get_db),
) -> EmployeeResponse:
    async with write_guard(db, f"updating employee {employee_id}"):
        emp = await employees.update_employee(db, employee_id, body)
        await employees.publish_snapshot(db)
    return EmployeeResponse.model_validate(emp)


@router.delete("/{employee_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_employee(employee_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> None:
    async with write_guard(db, f"deleting employee {employee_id}"):
        await employees.delete_employee(db, employee_id)
        await employees.publish_snapshot(db)


@router.post(
    "/{employee_id}/avatar",
    response_model=EmployeeResponse,
    summary="Upload a profile photo",
)
async def upload_avatar(
    employee_id: uuid.UUID,
    file: UploadFile,
    db: AsyncSession = Depends(get_db),
    photo_storage: LocalPhotoStorage = Depends(get_storage),
) -> EmployeeResponse:
    if file.content_type and not file.content_type.startswith("image/"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported content type '{file.content_type}', expected an image",
        )
    async with write_guard(db, f"uploading avatar for {employee_id}"):
        await employees.get_employee(db, employee_id)
        url = await photo_storage.put(make_key("avatars", file.filename), await file.read())
        emp = await employees.update_employee(db, employee_id, EmployeeUpdate(avatar_url=url))
        await employees.publish_snapshot(db)
    return EmployeeResponse.model_validate(emp)
