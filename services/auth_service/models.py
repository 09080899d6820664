"""
User and session data models for the authentication service.
"""

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from infrastructure.storage.record_codec import Timestamp, utc_now


def derive_username(display_name: str) -> str:
    """Lower-cased display name with each whitespace run replaced by '_'"""
    return re.sub(r"\s+", "_", display_name.strip().lower())


def normalize_email(email: str) -> str:
    return email.strip().lower()


class SessionUser(BaseModel):
    """The authenticated identity; a user record without its password hash"""
    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    display_name: str
    username: str
    name: str = ""
    phone: str = ""
    address: str = ""
    avatar: Optional[str] = None
    created_at: Timestamp = Field(default_factory=utc_now)
    email_verified: bool = False
    verification_token: Optional[str] = None
    verification_token_expiry: Optional[Timestamp] = None

    @model_validator(mode="before")
    @classmethod
    def _fill_display_name(cls, data):
        # Seeded accounts of the first client carried only name/username
        if isinstance(data, dict) and not data.get("display_name"):
            data = {**data, "display_name": data.get("name") or data.get("username") or ""}
        return data

    @property
    def seller_label(self) -> str:
        return self.username or self.email


class UserRecord(SessionUser):
    """Stored user account"""
    password_hash: str

    def to_session_user(self) -> SessionUser:
        return SessionUser(**self.model_dump(exclude={"password_hash"}))

    def has_email(self, email: str) -> bool:
        return self.email.lower() == normalize_email(email)


class ProfileUpdate(BaseModel):
    """Editable profile fields; anything else is rejected"""
    model_config = ConfigDict(extra="forbid")

    display_name: Optional[str] = None
    name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    avatar: Optional[str] = None

    @field_validator("display_name")
    @classmethod
    def _check_display_name(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value.strip()) < 2:
            raise ValueError("Display name must be at least 2 characters long")
        return value.strip() if value is not None else value

    def changes(self) -> dict:
        """Fields explicitly set by the caller, with username re-derived"""
        updates = self.model_dump(exclude_unset=True, exclude_none=True)
        if updates.get("display_name"):
            updates["username"] = derive_username(updates["display_name"])
        return updates
