"""Note and entry schemas."""

import json
from datetime import datetime
from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

from voicenotes.core.time import as_utc
from voicenotes.schemas.collaborator import Collaborator

# Timestamps come back naive from SQLite; responses always carry UTC.
UtcDatetime = Annotated[datetime, AfterValidator(as_utc)]


class EntryBase(BaseModel):
    content: Optional[str] = None
    audio_url: Optional[str] = None


class EntryCreate(EntryBase):
    """Schema for adding an entry; ``entry_order`` defaults to after the last entry."""

    entry_order: Optional[int] = None

    @model_validator(mode="after")
    def require_content_or_audio(self):
        if not (self.content and self.content.strip()) and not self.audio_url:
            raise ValueError("An entry needs content or an audio recording")
        return self


class EntryUpdate(BaseModel):
    """Schema for entry updates with partial fields."""

    content: Optional[str] = None
    audio_url: Optional[str] = None
    entry_order: Optional[int] = None


class EntryRead(EntryBase):
    id: int
    note_id: str
    entry_order: int
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)


TITLE_MAX_LENGTH = 200


class NoteCreate(BaseModel):
    title: str = Field(max_length=TITLE_MAX_LENGTH)
    entries: List[EntryCreate] = []

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Title must not be blank")
        return value


class NoteUpdate(BaseModel):
    title: Optional[str] = Field(default=None, max_length=TITLE_MAX_LENGTH)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Title must not be blank")
        return value


class NoteRead(BaseModel):
    id: str
    title: str
    owner_id: str
    collaborators: List[Collaborator] = []
    has_share_link: bool = False
    entries: List[EntryRead] = []
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("collaborators", mode="before")
    @classmethod
    def parse_collaborators(cls, value):
        # Stored as a JSON string on the model.
        if isinstance(value, str):
            return json.loads(value or "[]")
        return value


class SharedNoteRead(BaseModel):
    """Read-only view served to share-link holders; collaborators are not exposed."""

    id: str
    title: str
    entries: List[EntryRead] = []
    created_at: UtcDatetime
    updated_at: UtcDatetime

    model_config = ConfigDict(from_attributes=True)
