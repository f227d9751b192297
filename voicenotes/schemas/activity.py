"""Schemas for the note activity log."""

from pydantic import BaseModel, ConfigDict

from voicenotes.schemas.note import UtcDatetime


class ActivityRead(BaseModel):
    id: int
    note_id: str
    actor_id: str
    event_type: str
    description: str
    created_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)
