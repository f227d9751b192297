"""Collaborator schemas: the stored value object and the invite/update payloads."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, EmailStr, model_validator


Permission = Literal["view", "edit"]
PERMISSIONS = ("view", "edit")


class Collaborator(BaseModel):
    """One element of a note's serialized collaborator list."""

    user_id: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    permission: Permission
    joined_at: datetime


class CollaboratorInvite(BaseModel):
    """Invitation payload; ``user_id`` is derived from the email when omitted."""

    user_id: Optional[str] = None
    email: Optional[EmailStr] = None
    display_name: Optional[str] = None
    permission: Permission = "view"

    @model_validator(mode="after")
    def require_user_id_or_email(self):
        if not self.user_id and not self.email:
            raise ValueError("Either user_id or email is required")
        return self


class CollaboratorPermissionUpdate(BaseModel):
    permission: Permission
