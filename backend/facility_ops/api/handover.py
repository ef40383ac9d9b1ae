"""
Handover draft endpoints.

Drafts live in process memory; a client creates one when the handover
panel opens and discards it when the panel closes. Drafts left behind
expire after ``HANDOVER_DRAFT_TTL_SEC`` without activity.
"""

import uuid

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.api.errors import to_http, write_guard
from facility_ops.core.exceptions import DomainError
from facility_ops.db.session import get_db
from facility_ops.schemas.handover import (
    HandoverDraftResponse,
    HandoverNoteUpdate,
    HandoverToggleRequest,
)
from facility_ops.services import handover
from facility_ops.services.handover import HandoverDraft

router = APIRouter()


def _get_draft(draft_id: uuid.UUID) -> HandoverDraft:
    try:
        return handover.registry.get(draft_id)
    except DomainError as exc:
        raise to_http(exc) from exc


@router.post(
    "/drafts",
    response_model=HandoverDraftResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Open an empty handover draft",
)
async def create_draft() -> HandoverDraftResponse:
    return handover.registry.create().to_response()


@router.get("/drafts/{draft_id}", response_model=HandoverDraftResponse)
async def get_draft(draft_id: uuid.UUID) -> HandoverDraftResponse:
    return _get_draft(draft_id).to_response()


@router.delete("/drafts/{draft_id}", status_code=status.HTTP_204_NO_CONTENT)
async def discard_draft(draft_id: uuid.UUID) -> None:
    try:
        handover.registry.discard(draft_id)
    except DomainError as exc:
        raise to_http(exc) from exc


@router.post(
    "/drafts/{draft_id}/toggle",
    response_model=HandoverDraftResponse,
    summary="Add or remove a pending work-log entry",
)
async def toggle_entry(
    draft_id: uuid.UUID,
    body: HandoverToggleRequest,
    db: AsyncSession = Depends(get_db),
) -> HandoverDraftResponse:
    draft = _get_draft(draft_id)
    try:
        await handover.toggle_selection(db, draft, body.entry_id)
    except DomainError as exc:
        raise to_http(exc) from exc
    return draft.to_response()


@router.put("/drafts/{draft_id}/note", response_model=HandoverDraftResponse)
async def update_note(draft_id: uuid.UUID, body: HandoverNoteUpdate) -> HandoverDraftResponse:
    draft = _get_draft(draft_id)
    try:
        draft.set_note(body.note)
    except DomainError as exc:
        raise to_http(exc) from exc
    return draft.to_response()


@router.post(
    "/drafts/{draft_id}/submit",
    response_model=HandoverDraftResponse,
    summary="Deliver the handover to the next day's team",
)
async def submit_draft(draft_id: uuid.UUID, db: AsyncSession = Depends(get_db)) -> HandoverDraftResponse:
    draft = _get_draft(draft_id)
    async with write_guard(db, f"submitting handover {draft_id}"):
        await handover.submit(db, draft)
    return draft.to_response()


@router.post(
    "/drafts/{draft_id}/reset",
    response_model=HandoverDraftResponse,
    summary="Clear selection, note and sent flag",
)
async def reset_draft(draft_id: uuid.UUID) -> HandoverDraftResponse:
    draft = _get_draft(draft_id)
    try:
        draft.reset()
    except DomainError as exc:
        raise to_http(exc) from exc
    return draft.to_response()
