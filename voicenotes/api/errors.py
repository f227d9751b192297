"""Translate note-service failures into HTTP errors."""

from fastapi import HTTPException, status

from voicenotes.core.errors import NoteServiceError, RegistryFailure

FAILURE_STATUS = {
    RegistryFailure.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    RegistryFailure.UNAUTHORIZED: status.HTTP_403_FORBIDDEN,
    RegistryFailure.DUPLICATE_COLLABORATOR: status.HTTP_409_CONFLICT,
    RegistryFailure.WRITE_CONFLICT: status.HTTP_409_CONFLICT,
    RegistryFailure.LINK_GENERATION: status.HTTP_500_INTERNAL_SERVER_ERROR,
    RegistryFailure.INVALID_PERMISSION: 422,
}


def http_error(failure: RegistryFailure, detail: str | None = None) -> HTTPException:
    return HTTPException(status_code=FAILURE_STATUS[failure], detail=detail or failure.value)


def http_error_from(exc: NoteServiceError) -> HTTPException:
    return http_error(exc.failure, exc.detail)
