"""Share link generation and the public shared-note view."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from voicenotes.api.errors import http_error
from voicenotes.core.security import Identity
from voicenotes.db.session import get_db
from voicenotes.dependencies.auth import get_current_identity
from voicenotes.schemas.note import SharedNoteRead
from voicenotes.schemas.share import ShareLinkRead
from voicenotes.services.sharing import generate_share_link, get_shared_note

router = APIRouter(tags=["sharing"])


@router.post("/notes/{note_id}/share-link", response_model=ShareLinkRead, status_code=201)
async def create_share_link(
    note_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    result = generate_share_link(db, identity, note_id)
    if not result:
        raise http_error(result.error, result.detail)
    return ShareLinkRead(url=result.url, token=result.token)


@router.get("/share/{note_id}", response_model=SharedNoteRead)
async def read_shared_note(note_id: str, token: str = Query(default=""), db: Session = Depends(get_db)):
    note = get_shared_note(db, note_id, token)
    if note is None:
        # Same answer for unknown notes and bad tokens.
        raise HTTPException(status_code=404, detail="Shared note not found")
    return note
