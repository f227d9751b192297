"""Note and entry endpoints."""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from voicenotes.api.errors import http_error_from
from voicenotes.core.errors import NoteServiceError
from voicenotes.core.security import Identity
from voicenotes.crud.crud_note import entry_crud, note_crud
from voicenotes.db.session import get_db
from voicenotes.dependencies.auth import get_current_identity
from voicenotes.schemas.note import EntryCreate, EntryRead, EntryUpdate, NoteCreate, NoteRead, NoteUpdate

router = APIRouter(prefix="/notes", tags=["notes"])


@router.post("", response_model=NoteRead)
async def create_note(
    note_in: NoteCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        return note_crud.create(db, obj_in=note_in, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)


@router.get("", response_model=list[NoteRead])
async def list_notes(db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    return note_crud.get_multi(db, identity=identity)


@router.get("/{note_id}", response_model=NoteRead)
async def get_note(note_id: str, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    try:
        return note_crud.get(db, note_id=note_id, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)


@router.put("/{note_id}", response_model=NoteRead)
async def update_note(
    note_id: str,
    note_in: NoteUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        return note_crud.update(db, note_id=note_id, obj_in=note_in, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)


@router.delete("/{note_id}")
async def delete_note(note_id: str, db: Session = Depends(get_db), identity: Identity = Depends(get_current_identity)):
    try:
        note_crud.delete(db, note_id=note_id, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)
    return {"status": "deleted", "id": note_id}


@router.post("/{note_id}/entries", response_model=EntryRead)
async def create_entry(
    note_id: str,
    entry_in: EntryCreate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        return entry_crud.create(db, note_id=note_id, obj_in=entry_in, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)


@router.put("/{note_id}/entries/{entry_id}", response_model=EntryRead)
async def update_entry(
    note_id: str,
    entry_id: int,
    entry_in: EntryUpdate,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        return entry_crud.update(db, note_id=note_id, entry_id=entry_id, obj_in=entry_in, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@router.delete("/{note_id}/entries/{entry_id}")
async def delete_entry(
    note_id: str,
    entry_id: int,
    db: Session = Depends(get_db),
    identity: Identity = Depends(get_current_identity),
):
    try:
        entry_crud.delete(db, note_id=note_id, entry_id=entry_id, identity=identity)
    except NoteServiceError as exc:
        raise http_error_from(exc)
    return {"status": "deleted", "id": entry_id}
