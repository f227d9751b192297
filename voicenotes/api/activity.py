"""Note activity endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from voicenotes.api.errors import http_error_from
from voicenotes.core.errors import NoteServiceError
from voicenotes.core.security import Identity
from voicenotes.crud.crud_note import note_crud
from voicenotes.db.session import get_db
from voicenotes.dependencies.auth import get_current_identity
from voicenotes.schemas.activity import ActivityRead
from voicenotes.services.access_policy import NoteAction
from voicenotes.services.activity import list_activity

router = APIRouter(prefix="/notes", tags=["activity"])


@router.get("/{note_id}/activity", response_model=list[ActivityRead])
async def get_activity(
    note_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        note_crud.get(db, note_id=note_id, identity=identity, action=NoteAction.MANAGE)
    except NoteServiceError as exc:
        raise http_error_from(exc)
    return list_activity(db, note_id)
