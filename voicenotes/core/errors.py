"""Error taxonomy shared by the note store, the collaborator registry and sharing."""

from enum import Enum


class RegistryFailure(str, Enum):
    NOT_FOUND = "not_found"
    DUPLICATE_COLLABORATOR = "duplicate_collaborator"
    WRITE_CONFLICT = "write_conflict"
    LINK_GENERATION = "link_generation"
    UNAUTHORIZED = "unauthorized"
    INVALID_PERMISSION = "invalid_permission"


class NoteServiceError(Exception):
    failure: RegistryFailure

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFound(NoteServiceError):
    failure = RegistryFailure.NOT_FOUND


class DuplicateCollaborator(NoteServiceError):
    failure = RegistryFailure.DUPLICATE_COLLABORATOR


class WriteConflict(NoteServiceError):
    """The store rejected a write, or the collaborator list kept changing underneath us."""

    failure = RegistryFailure.WRITE_CONFLICT


class LinkGenerationError(NoteServiceError):
    failure = RegistryFailure.LINK_GENERATION


class Unauthorized(NoteServiceError):
    failure = RegistryFailure.UNAUTHORIZED


class InvalidPermission(NoteServiceError):
    failure = RegistryFailure.INVALID_PERMISSION
