"""Activity services for recording note events."""

from sqlalchemy.orm import Session

from voicenotes.models.activity import NoteActivity


def record_activity(db: Session, note_id: str, actor_id: str, event_type: str, description: str) -> NoteActivity:
    """Stage an activity row; it is committed together with the change it describes."""
    event = NoteActivity(note_id=note_id, actor_id=actor_id, event_type=event_type, description=description)
    db.add(event)
    return event


def list_activity(db: Session, note_id: str) -> list[NoteActivity]:
    return (
        db.query(NoteActivity)
        .filter(NoteActivity.note_id == note_id)
        .order_by(NoteActivity.created_at.asc(), NoteActivity.id.asc())
        .all()
    )
