"""Collaborator administration endpoints (owner only, listing for anyone with read access)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from voicenotes.api.errors import http_error, http_error_from
from voicenotes.core.errors import NoteServiceError
from voicenotes.core.security import Identity
from voicenotes.db.session import get_db
from voicenotes.dependencies.auth import get_current_identity
from voicenotes.schemas.collaborator import Collaborator, CollaboratorInvite, CollaboratorPermissionUpdate
from voicenotes.services.collaborators import (
    invite_collaborator,
    list_collaborators,
    remove_collaborator,
    update_collaborator_permission,
)

router = APIRouter(prefix="/notes/{note_id}/collaborators", tags=["collaborators"])


def _current_list(db: Session, note_id: str, identity: Identity) -> list[Collaborator]:
    try:
        return list_collaborators(db, identity, note_id)
    except NoteServiceError as exc:
        raise http_error_from(exc)


@router.get("", response_model=list[Collaborator])
async def read_collaborators(
    note_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    return _current_list(db, note_id, identity)


@router.post("", response_model=list[Collaborator], status_code=201)
async def invite(
    note_id: str,
    invite_in: CollaboratorInvite,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    outcome = invite_collaborator(db, identity, note_id, invite_in)
    if not outcome:
        raise http_error(outcome.error, outcome.detail)
    return _current_list(db, note_id, identity)


@router.patch("/{user_id}", response_model=list[Collaborator])
async def change_permission(
    note_id: str,
    user_id: str,
    update_in: CollaboratorPermissionUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    outcome = update_collaborator_permission(db, identity, note_id, user_id, update_in.permission)
    if not outcome:
        raise http_error(outcome.error, outcome.detail)
    return _current_list(db, note_id, identity)


@router.delete("/{user_id}", response_model=list[Collaborator])
async def remove(
    note_id: str,
    user_id: str,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    outcome = remove_collaborator(db, identity, note_id, user_id)
    if not outcome:
        raise http_error(outcome.error, outcome.detail)
    return _current_list(db, note_id, identity)
