"""Note entry model: one text and/or audio block inside a note."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from voicenotes.db.base_class import Base
from voicenotes.core.time import utc_now


class NoteEntry(Base):
    __tablename__ = "note_entries"

    id = Column(Integer, primary_key=True, index=True)
    note_id = Column(String(36), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=True)
    audio_url = Column(String(2048), nullable=True)
    entry_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    note = relationship("Note", back_populates="entries")
