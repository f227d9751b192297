"""Authorization rules for notes and entries.

Every storage access path consults these checks with the caller's identity;
client-side checks in the web app are never the only gate.

==========================  ==================================================
Operation                   Allowed when
==========================  ==================================================
note create                 caller is the owner being set
note read                   owner, or listed collaborator (any permission)
note update                 owner, or collaborator with ``edit``
note delete                 owner
entry create/read/update    parent note's update/read/update rule
entry delete                owner of the parent note
manage collaborators/share  owner
==========================  ==================================================
"""

import json
from enum import Enum
from typing import Optional

from voicenotes.core.errors import Unauthorized
from voicenotes.core.security import Identity
from voicenotes.models.note import Note


class NoteAction(str, Enum):
    READ = "read"
    UPDATE = "update"
    DELETE = "delete"
    MANAGE = "manage"
    ENTRY_CREATE = "entry_create"
    ENTRY_READ = "entry_read"
    ENTRY_UPDATE = "entry_update"
    ENTRY_DELETE = "entry_delete"


def is_owner(note: Note, identity: Identity) -> bool:
    return note.owner_id == identity.user_id


def collaborator_permission(note: Note, identity: Identity) -> Optional[str]:
    """Return the caller's permission on ``note``, or None when not listed.

    A collaborator matches on ``user_id``, or on the identity's email claim so
    that email invitations take effect once the invitee signs in.
    """
    email = identity.email.lower() if identity.email else None
    for entry in json.loads(note.collaborators or "[]"):
        if entry.get("user_id") == identity.user_id:
            return entry.get("permission")
        if email and (entry.get("email") or "").lower() == email:
            return entry.get("permission")
    return None


def can_create_note(owner_id: str, identity: Identity) -> bool:
    return owner_id == identity.user_id


def can_read_note(note: Note, identity: Identity) -> bool:
    return is_owner(note, identity) or collaborator_permission(note, identity) is not None


def can_update_note(note: Note, identity: Identity) -> bool:
    return is_owner(note, identity) or collaborator_permission(note, identity) == "edit"


def can_delete_note(note: Note, identity: Identity) -> bool:
    return is_owner(note, identity)


_RULES = {
    NoteAction.READ: can_read_note,
    NoteAction.UPDATE: can_update_note,
    NoteAction.DELETE: can_delete_note,
    NoteAction.MANAGE: is_owner,
    NoteAction.ENTRY_CREATE: can_update_note,
    NoteAction.ENTRY_READ: can_read_note,
    NoteAction.ENTRY_UPDATE: can_update_note,
    NoteAction.ENTRY_DELETE: is_owner,
}


def is_allowed(action: NoteAction, note: Note, identity: Identity) -> bool:
    return _RULES[action](note, identity)


def authorize(action: NoteAction, note: Note, identity: Identity) -> None:
    if not is_allowed(action, note, identity):
        raise Unauthorized(f"Not allowed to {action.value.replace('_', ' ')} on this note")
