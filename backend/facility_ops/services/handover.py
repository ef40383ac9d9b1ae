"""
Shift handover composer.

A draft is a short-lived, process-local selection of pending work-log
entries plus a free-text note. Drafts are never written to the database;
only the delivery itself leaves a trace, as a notification for the
receiving shift.
"""

import datetime as dt
import logging
import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass, field

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from facility_ops.core.config import settings
from facility_ops.core.exceptions import (
    HandoverAlreadySentError,
    HandoverValidationError,
    NotFoundError,
)
from facility_ops.db.models import Notification, WorkLog
from facility_ops.schemas.handover import HandoverDraftResponse
from facility_ops.services import notifications, worklog_workflow
from facility_ops.services.notifier import deliver_handover
from facility_ops.services.schedule import shift_for_date

logger = logging.getLogger(__name__)


@dataclass
class HandoverDraft:
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    selected_ids: list[int] = field(default_factory=list)
    note: str = ""
    sent: bool = False
    sent_at: dt.datetime | None = None
    recipient: str | None = None
    # Set while a delivery is in flight; a second submit must not pass validation
    sending: bool = False

    def ensure_editable(self) -> None:
        if self.sent or self.sending:
            raise HandoverAlreadySentError("Handover already sent; reset the draft first")

    def toggle(self, entry_id: int) -> bool:
        """Flip membership of ``entry_id``; returns True if now selected."""
        self.ensure_editable()
        if entry_id in self.selected_ids:
            self.selected_ids.remove(entry_id)
            return False
        self.selected_ids.append(entry_id)
        return True

    def set_note(self, note: str) -> None:
        self.ensure_editable()
        self.note = note

    def validate_submit(self) -> None:
        self.ensure_editable()
        if not self.selected_ids and not self.note.strip():
            raise HandoverValidationError("Select items or write a note to hand over")

    def mark_sent(self, recipient: str, when: dt.datetime) -> None:
        self.sent = True
        self.sent_at = when
        self.recipient = recipient

    def reset(self) -> None:
        if self.sending:
            raise HandoverAlreadySentError("Handover is being sent; try again shortly")
        self.selected_ids = []
        self.note = ""
        self.sent = False
        self.sent_at = None
        self.recipient = None

    def to_response(self) -> HandoverDraftResponse:
        return HandoverDraftResponse(
            id=self.id,
            selected_ids=list(self.selected_ids),
            note=self.note,
            sent=self.sent,
            sent_at=self.sent_at,
            recipient=self.recipient,
        )


class HandoverRegistry:
    """
    Process-local draft store.

    Drafts untouched for longer than ``ttl_sec`` are dropped the next time
    any draft is created or looked up, so abandoned panels do not pile up.
    """

    def __init__(self, ttl_sec: float, clock: Callable[[], float] = time.monotonic) -> None:
        self.ttl_sec = ttl_sec
        self._clock = clock
        self._drafts: dict[uuid.UUID, HandoverDraft] = {}
        self._touched: dict[uuid.UUID, float] = {}

    def __len__(self) -> int:
        return len(self._drafts)

    def _evict_stale(self) -> None:
        cutoff = self._clock() - self.ttl_sec
        stale = [
            draft_id
            for draft_id, touched in self._touched.items()
            if touched < cutoff and not self._drafts[draft_id].sending
        ]
        for draft_id in stale:
            del self._drafts[draft_id]
            del self._touched[draft_id]
        if stale:
            logger.info("Evicted %d stale handover draft(s)", len(stale))

    def create(self) -> HandoverDraft:
        self._evict_stale()
        draft = HandoverDraft()
        self._drafts[draft.id] = draft
        self._touched[draft.id] = self._clock()
        return draft

    def get(self, draft_id: uuid.UUID) -> HandoverDraft:
        self._evict_stale()
        draft = self._drafts.get(draft_id)
        if draft is None:
            raise NotFoundError(f"Handover draft {draft_id} not found")
        self._touched[draft_id] = self._clock()
        return draft

    def discard(self, draft_id: uuid.UUID) -> None:
        if self._drafts.pop(draft_id, None) is None:
            raise NotFoundError(f"Handover draft {draft_id} not found")
        del self._touched[draft_id]

    def clear(self) -> None:
        self._drafts.clear()
        self._touched.clear()


registry = HandoverRegistry(settings.HANDOVER_DRAFT_TTL_SEC)


async def toggle_selection(db: AsyncSession, draft: HandoverDraft, entry_id: int) -> HandoverDraft:
    draft.ensure_editable()
    if entry_id not in draft.selected_ids:
        entry = await worklog_workflow.get_entry(db, entry_id)
        if not worklog_workflow.is_pending(entry):
            raise HandoverValidationError(f"Work log {entry_id} is not awaiting handover")
    draft.toggle(entry_id)
    return draft


async def _deliver(db: AsyncSession, draft: HandoverDraft, today: dt.date) -> tuple[str, int]:
    receiving = await shift_for_date(db, today + dt.timedelta(days=1))
    recipient = f"Team {receiving.team} ({receiving.worker_name})"

    items: list[WorkLog] = []
    if draft.selected_ids:
        result = await db.execute(
            select(WorkLog).where(WorkLog.id.in_(draft.selected_ids)).order_by(WorkLog.time)
        )
        items = list(result.scalars().all())

    payload = {
        "draft_id": str(draft.id),
        "recipient": recipient,
        "team": receiving.team,
        "note": draft.note,
        "items": [
            {
                "id": e.id,
                "time": e.time,
                "category": e.category,
                "location": e.location,
                "priority": e.priority,
                "status": e.status,
                "details": e.details,
            }
            for e in items
        ],
    }
    await deliver_handover(payload)
    return recipient, len(items)


async def submit(
    db: AsyncSession, draft: HandoverDraft, today: dt.date | None = None
) -> HandoverDraft:
    # No await between the check and the flag, so overlapping submits see it
    draft.validate_submit()
    draft.sending = True
    try:
        recipient, item_count = await _deliver(db, draft, today or dt.date.today())
        draft.mark_sent(recipient, dt.datetime.now(dt.timezone.utc))
    finally:
        draft.sending = False
    logger.info("Handover %s sent to %s (%d item(s))", draft.id, recipient, item_count)

    db.add(
        Notification(
            title="Handover sent",
            message=f"Handover with {item_count} item(s) was sent to {recipient}.",
            type="success",
            category="Handover",
        )
    )
    await db.commit()
    await notifications.publish_snapshot(db)
    return draft
