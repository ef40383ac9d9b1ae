import datetime as dt
import uuid

from pydantic import BaseModel


class HandoverDraftResponse(BaseModel):
    id: uuid.UUID
    selected_ids: list[int]
    note: str
    sent: bool
    sent_at: dt.datetime | None = None
    recipient: str | None = None


class HandoverToggleRequest(BaseModel):
    entry_id: int


class HandoverNoteUpdate(BaseModel):
    note: str
