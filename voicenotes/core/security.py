"""Security utilities for Voice Notes: JWT verification and the caller identity.

Tokens are issued by the external identity provider and signed with the shared
secret. ``create_access_token`` mirrors what the provider issues and is used by
local tooling and tests.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from voicenotes.core.settings import get_settings


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, passed explicitly into every note operation."""

    user_id: str
    email: Optional[str] = None


def create_access_token(user_id: str, email: Optional[str] = None, expires_minutes: Optional[int] = None) -> str:
    settings = get_settings()
    expire_delta = timedelta(minutes=expires_minutes if expires_minutes is not None else settings.access_token_expire_minutes)
    expire = datetime.now(timezone.utc) + expire_delta
    payload: Dict[str, Any] = {"sub": str(user_id), "exp": expire}
    if email:
        payload["email"] = email
    return jwt.encode(payload, settings.secret_key, algorithm="HS256")


def decode_access_token(token: str) -> Dict[str, Any]:
    settings = get_settings()
    try:
        return jwt.decode(token, settings.secret_key, algorithms=["HS256"])
    except jwt.ExpiredSignatureError as exc:
        raise ValueError("Expired token") from exc
    except jwt.InvalidTokenError as exc:
        raise ValueError("Invalid token") from exc


def identity_from_token(token: str) -> Identity:
    payload = decode_access_token(token)
    user_id = payload.get("sub")
    if not user_id:
        raise ValueError("Token has no subject")
    return Identity(user_id=str(user_id), email=payload.get("email"))
