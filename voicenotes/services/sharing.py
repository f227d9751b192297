"""Share links: a per-note random token that grants read access to whoever holds it."""

import hmac
import logging
import secrets
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from voicenotes.core.errors import LinkGenerationError, NoteServiceError, NotFound, RegistryFailure
from voicenotes.core.security import Identity
from voicenotes.core.settings import get_settings
from voicenotes.models.note import Note
from voicenotes.services.access_policy import NoteAction, authorize, can_read_note
from voicenotes.services.activity import record_activity

logger = logging.getLogger(__name__)

SHARE_TOKEN_BYTES = 32


@dataclass(frozen=True)
class ShareLinkResult:
    url: Optional[str] = None
    token: Optional[str] = None
    error: Optional[RegistryFailure] = None
    detail: Optional[str] = None

    def __bool__(self) -> bool:
        return self.error is None


def build_share_url(note_id: str, token: str) -> str:
    return f"{get_settings().app_origin}/share/{note_id}?token={token}"


def _store_new_token(db: Session, identity: Identity, note_id: str) -> str:
    note = db.get(Note, note_id, populate_existing=True)
    if note is None or not can_read_note(note, identity):
        raise NotFound("Note not found")
    authorize(NoteAction.MANAGE, note, identity)

    token = secrets.token_urlsafe(SHARE_TOKEN_BYTES)
    # Overwrites any previous token, which invalidates links built from it.
    note.sharing_token = token
    record_activity(db, note.id, identity.user_id, "share_link_generated", "Share link generated")
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        raise LinkGenerationError(f"Could not store share token for note {note_id}") from exc
    return token


def generate_share_link(db: Session, identity: Identity, note_id: str) -> ShareLinkResult:
    try:
        token = _store_new_token(db, identity, note_id)
    except NoteServiceError as exc:
        logger.warning("Generating share link for note %s failed: %s", note_id, exc.detail)
        return ShareLinkResult(error=exc.failure, detail=exc.detail)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Generating share link for note %s failed", note_id)
        return ShareLinkResult(error=RegistryFailure.LINK_GENERATION, detail="Failed to generate share link")
    return ShareLinkResult(url=build_share_url(note_id, token), token=token)


def validate_share_token(db: Session, note_id: str, token: Optional[str]) -> bool:
    """Check ``token`` against the note's stored token in constant time."""
    if not token:
        return False
    try:
        stored = db.query(Note.sharing_token).filter(Note.id == note_id).scalar()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Validating share token for note %s failed", note_id)
        return False
    if not stored:
        return False
    return hmac.compare_digest(stored.encode("utf-8"), token.encode("utf-8"))


def get_shared_note(db: Session, note_id: str, token: Optional[str]) -> Optional[Note]:
    if not validate_share_token(db, note_id, token):
        return None
    return db.get(Note, note_id)
