"""Note model: owner, serialized collaborator list and share token."""

import uuid

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from voicenotes.db.base_class import Base
from voicenotes.core.time import utc_now
from voicenotes.models.activity import NoteActivity
from voicenotes.models.note_entry import NoteEntry


def _new_note_id() -> str:
    return str(uuid.uuid4())


class Note(Base):
    __tablename__ = "notes"

    id = Column(String(36), primary_key=True, default=_new_note_id)
    title = Column(String(200), nullable=False)
    owner_id = Column(String, nullable=False, index=True)
    # JSON array of collaborator objects; always rewritten as a whole.
    collaborators = Column(Text, nullable=False, default="[]")
    sharing_token = Column(String, nullable=True)
    # Bumped by every collaborator-list write; writes are conditional on it.
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    entries = relationship(
        "NoteEntry",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=[NoteEntry.entry_order, NoteEntry.id],
    )
    activity = relationship(
        "NoteActivity",
        back_populates="note",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by=NoteActivity.created_at,
    )

    @property
    def has_share_link(self) -> bool:
        return self.sharing_token is not None
