"""Activity events recorded against a note (collaborators, share links, lifecycle)."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from voicenotes.db.base_class import Base
from voicenotes.core.time import utc_now


class NoteActivity(Base):
    __tablename__ = "note_activity"

    id = Column(Integer, primary_key=True, index=True)
    note_id = Column(String(36), ForeignKey("notes.id", ondelete="CASCADE"), nullable=False, index=True)
    actor_id = Column(String, nullable=False)
    event_type = Column(String(50), nullable=False)
    description = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)

    note = relationship("Note", back_populates="activity")
