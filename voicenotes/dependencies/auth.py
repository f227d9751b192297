"""Authentication dependency producing the caller identity."""

from fastapi import Header, HTTPException, status

from voicenotes.core.security import Identity, identity_from_token


def get_current_identity(authorization: str | None = Header(default=None)) -> Identity:
    # Expect Authorization: Bearer <token> issued by the identity provider
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    token = authorization.split(" ", 1)[1]
    try:
        return identity_from_token(token)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
