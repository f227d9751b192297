"""CRUD operations for notes and their entries.

Every method takes the caller's identity and checks the access policy before
touching a row. A note the caller cannot read is reported as missing.
"""

import json
from typing import List

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from voicenotes.core.errors import NotFound, Unauthorized
from voicenotes.core.security import Identity
from voicenotes.models.note import Note
from voicenotes.models.note_entry import NoteEntry
from voicenotes.schemas.note import EntryCreate, EntryUpdate, NoteCreate, NoteUpdate
from voicenotes.services.access_policy import NoteAction, authorize, can_create_note, can_read_note
from voicenotes.services.activity import record_activity


def _json_fragment(value: str) -> str:
    """How ``value`` appears inside the stored collaborators JSON."""
    return json.dumps(value, ensure_ascii=False)[1:-1]


class CRUDNote:
    def create(self, db: Session, *, obj_in: NoteCreate, identity: Identity) -> Note:
        owner_id = identity.user_id
        if not can_create_note(owner_id, identity):
            raise Unauthorized("Notes can only be created for yourself")
        note = Note(title=obj_in.title, owner_id=owner_id, collaborators="[]")
        note.entries = [
            NoteEntry(
                content=entry.content,
                audio_url=entry.audio_url,
                entry_order=entry.entry_order if entry.entry_order is not None else index,
            )
            for index, entry in enumerate(obj_in.entries)
        ]
        db.add(note)
        db.flush()
        record_activity(db, note.id, identity.user_id, "note_created", f"Note created: {note.title[:40]}")
        db.commit()
        db.refresh(note)
        return note

    def get(self, db: Session, *, note_id: str, identity: Identity, action: NoteAction = NoteAction.READ) -> Note:
        note = db.get(Note, note_id)
        if note is None or not can_read_note(note, identity):
            raise NotFound("Note not found")
        authorize(action, note, identity)
        return note

    def get_multi(self, db: Session, *, identity: Identity) -> List[Note]:
        """Notes the caller owns or collaborates on, newest first."""
        clauses = [
            Note.owner_id == identity.user_id,
            Note.collaborators.contains(_json_fragment(identity.user_id), autoescape=True),
        ]
        if identity.email:
            # Invited emails are stored lowercased.
            clauses.append(Note.collaborators.contains(_json_fragment(identity.email.lower()), autoescape=True))
        candidates = (
            db.query(Note)
            .filter(or_(*clauses))
            .order_by(Note.created_at.desc(), Note.id.desc())
            .all()
        )
        # The LIKE prefilter over the JSON text is loose; the policy decides.
        return [note for note in candidates if can_read_note(note, identity)]

    def update(self, db: Session, *, note_id: str, obj_in: NoteUpdate, identity: Identity) -> Note:
        note = self.get(db, note_id=note_id, identity=identity, action=NoteAction.UPDATE)
        update_data = obj_in.model_dump(exclude_unset=True, exclude_none=True)
        for field, value in update_data.items():
            setattr(note, field, value)
        db.commit()
        db.refresh(note)
        return note

    def delete(self, db: Session, *, note_id: str, identity: Identity) -> Note:
        note = self.get(db, note_id=note_id, identity=identity, action=NoteAction.DELETE)
        db.delete(note)
        db.commit()
        return note


class CRUDNoteEntry:
    def create(self, db: Session, *, note_id: str, obj_in: EntryCreate, identity: Identity) -> NoteEntry:
        note = note_crud.get(db, note_id=note_id, identity=identity, action=NoteAction.ENTRY_CREATE)
        entry_order = obj_in.entry_order
        if entry_order is None:
            last = db.query(func.max(NoteEntry.entry_order)).filter(NoteEntry.note_id == note.id).scalar()
            entry_order = 0 if last is None else last + 1
        entry = NoteEntry(note_id=note.id, content=obj_in.content, audio_url=obj_in.audio_url, entry_order=entry_order)
        db.add(entry)
        db.commit()
        db.refresh(entry)
        return entry

    def _get_entry(self, db: Session, note: Note, entry_id: int) -> NoteEntry:
        entry = db.query(NoteEntry).filter(NoteEntry.id == entry_id, NoteEntry.note_id == note.id).first()
        if not entry:
            raise NotFound("Entry not found")
        return entry

    def update(self, db: Session, *, note_id: str, entry_id: int, obj_in: EntryUpdate, identity: Identity) -> NoteEntry:
        note = note_crud.get(db, note_id=note_id, identity=identity, action=NoteAction.ENTRY_UPDATE)
        entry = self._get_entry(db, note, entry_id)
        update_data = obj_in.model_dump(exclude_unset=True)
        content = update_data.get("content", entry.content)
        audio_url = update_data.get("audio_url", entry.audio_url)
        if not (content and content.strip()) and not audio_url:
            raise ValueError("An entry needs content or an audio recording")
        if update_data.get("entry_order", 0) is None:
            del update_data["entry_order"]
        for field, value in update_data.items():
            setattr(entry, field, value)
        db.commit()
        db.refresh(entry)
        return entry

    def delete(self, db: Session, *, note_id: str, entry_id: int, identity: Identity) -> NoteEntry:
        note = note_crud.get(db, note_id=note_id, identity=identity, action=NoteAction.ENTRY_DELETE)
        entry = self._get_entry(db, note, entry_id)
        db.delete(entry)
        db.commit()
        return entry


note_crud = CRUDNote()
entry_crud = CRUDNoteEntry()
