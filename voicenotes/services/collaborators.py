"""Collaborator registry for notes.

A note's collaborators live in one serialized JSON field. Every mutation reads
the list, changes it in memory and writes the whole list back. The write is
conditional on the note's ``version`` as it was read; when another writer got
there first the operation re-reads and tries again, so concurrent invitations
do not overwrite each other.

Operations never raise past their own boundary. They return a
``RegistryOutcome`` that is truthy on success and carries a
``RegistryFailure`` otherwise, and they log the reason for every failure.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from pydantic import TypeAdapter
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voicenotes.core.errors import (
    DuplicateCollaborator,
    InvalidPermission,
    NoteServiceError,
    NotFound,
    RegistryFailure,
    WriteConflict,
)
from voicenotes.core.security import Identity
from voicenotes.core.settings import get_settings
from voicenotes.core.time import utc_now
from voicenotes.models.note import Note
from voicenotes.schemas.collaborator import PERMISSIONS, Collaborator, CollaboratorInvite
from voicenotes.services.access_policy import NoteAction, authorize, can_read_note
from voicenotes.services.activity import record_activity

logger = logging.getLogger(__name__)

_collaborator_list = TypeAdapter(List[Collaborator])

# Returns the new list and an activity description, or None when nothing changes.
ListChange = Callable[[Note, List[Collaborator]], Optional[Tuple[List[Collaborator], str]]]


@dataclass(frozen=True)
class RegistryOutcome:
    error: Optional[RegistryFailure] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


SUCCESS = RegistryOutcome()


def synthesize_user_id(email: str) -> str:
    """Derive a stable collaborator id for someone invited by email."""
    return "user_" + re.sub(r"[^a-zA-Z0-9]", "_", email)


def load_collaborators(raw: Optional[str]) -> List[Collaborator]:
    return _collaborator_list.validate_json(raw or "[]")


def dump_collaborators(collaborators: List[Collaborator]) -> str:
    # Unescaped text so visible-note listing can match ids and emails with LIKE.
    return json.dumps([c.model_dump(mode="json", exclude_none=True) for c in collaborators], ensure_ascii=False)


def _fetch_managed_note(db: Session, identity: Identity, note_id: str) -> Note:
    try:
        note = db.get(Note, note_id, populate_existing=True)
    except SQLAlchemyError as exc:
        db.rollback()
        raise WriteConflict(f"Could not load note {note_id}") from exc
    if note is None or not can_read_note(note, identity):
        raise NotFound("Note not found")
    authorize(NoteAction.MANAGE, note, identity)
    return note


def _write_collaborators(
    db: Session,
    note: Note,
    collaborators: List[Collaborator],
    identity: Identity,
    event_type: str,
    description: str,
) -> bool:
    """Write the list if the note still has the version we read. Returns False on a lost race."""
    read_version = note.version
    try:
        result = db.execute(
            update(Note)
            .where(Note.id == note.id, Note.version == read_version)
            .values(
                collaborators=dump_collaborators(collaborators),
                version=read_version + 1,
                updated_at=utc_now(),
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            db.rollback()
            return False
        record_activity(db, note.id, identity.user_id, event_type, description)
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise WriteConflict(f"Could not update collaborators of note {note.id}") from exc
    return True


def _rewrite(db: Session, identity: Identity, note_id: str, change: ListChange, event_type: str) -> None:
    attempts = get_settings().collaborator_write_retries
    for attempt in range(1, attempts + 1):
        note = _fetch_managed_note(db, identity, note_id)
        result = change(note, load_collaborators(note.collaborators))
        if result is None:
            return
        collaborators, description = result
        if _write_collaborators(db, note, collaborators, identity, event_type, description):
            return
        logger.info("Collaborators of note %s changed concurrently (attempt %d/%d)", note_id, attempt, attempts)
    raise WriteConflict(f"Collaborators of note {note_id} kept changing; giving up after {attempts} attempts")


def _run(operation: str, note_id: str, fn: Callable[[], None]) -> RegistryOutcome:
    try:
        fn()
    except NoteServiceError as exc:
        logger.warning("%s on note %s failed: %s", operation, note_id, exc.detail)
        return RegistryOutcome(error=exc.failure, detail=exc.detail)
    except SQLAlchemyError:
        logger.exception("%s on note %s failed", operation, note_id)
        return RegistryOutcome(error=RegistryFailure.WRITE_CONFLICT, detail="Storage error")
    return SUCCESS


def invite_collaborator(db: Session, identity: Identity, note_id: str, invite: CollaboratorInvite) -> RegistryOutcome:
    """Append a collaborator unless their user id or email is already on the note."""
    email = str(invite.email).lower() if invite.email else None
    user_id = invite.user_id or synthesize_user_id(email)

    def change(note: Note, current: List[Collaborator]):
        if user_id == note.owner_id:
            raise DuplicateCollaborator("The owner already has access to this note")
        for existing in current:
            same_email = email is not None and existing.email is not None and existing.email.lower() == email.lower()
            if existing.user_id == user_id or same_email:
                raise DuplicateCollaborator("Collaborator already exists")
        collaborator = Collaborator(
            user_id=user_id,
            email=email,
            display_name=invite.display_name or (email.split("@")[0] if email else None),
            permission=invite.permission,
            joined_at=utc_now(),
        )
        return [*current, collaborator], f"Invited {email or user_id} with {invite.permission} access"

    return _run("invite", note_id, lambda: _rewrite(db, identity, note_id, change, "collaborator_invited"))


def remove_collaborator(db: Session, identity: Identity, note_id: str, user_id: str) -> RegistryOutcome:
    """Drop a collaborator; removing someone who is not listed succeeds without a write."""

    def change(note: Note, current: List[Collaborator]):
        remaining = [c for c in current if c.user_id != user_id]
        if len(remaining) == len(current):
            return None
        return remaining, f"Removed {user_id}"

    return _run("remove", note_id, lambda: _rewrite(db, identity, note_id, change, "collaborator_removed"))


def update_collaborator_permission(
    db: Session, identity: Identity, note_id: str, user_id: str, permission: str
) -> RegistryOutcome:
    def change(note: Note, current: List[Collaborator]):
        if not any(c.user_id == user_id and c.permission != permission for c in current):
            return None
        updated = [
            c.model_copy(update={"permission": permission}) if c.user_id == user_id else c
            for c in current
        ]
        return updated, f"Changed {user_id} to {permission} access"

    def apply() -> None:
        if permission not in PERMISSIONS:
            raise InvalidPermission(f"Unknown permission: {permission}")
        _rewrite(db, identity, note_id, change, "collaborator_permission_changed")

    return _run("update permission", note_id, apply)


def list_collaborators(db: Session, identity: Identity, note_id: str) -> List[Collaborator]:
    """Current collaborators in invitation order. Raises ``NotFound`` for notes the caller cannot read."""
    note = db.get(Note, note_id, populate_existing=True)
    if note is None or not can_read_note(note, identity):
        raise NotFound("Note not found")
    return load_collaborators(note.collaborators)
