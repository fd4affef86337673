from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True, slots=True)
class NewUser:
    """Payload an adapter needs to persist a user; the password is already hashed."""

    email: str
    password_hash: str = field(repr=False)
    first_name: str
    last_name: str


@dataclass(frozen=True, slots=True)
class User:
    """Stored user record.

    ``id`` is opaque to callers: a UUID string on the relational backend,
    an ObjectId hex string on the document backend.  Only adapters and
    the auth service ever see this type.
    """

    id: str
    email: str
    password_hash: str = field(repr=False)
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime

    def to_view(self) -> UserView:
        return UserView(
            id=self.id,
            email=self.email,
            first_name=self.first_name,
            last_name=self.last_name,
            is_active=self.is_active,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


@dataclass(frozen=True, slots=True)
class UserView:
    """User without the password hash; the only shape that leaves the service."""

    id: str
    email: str
    first_name: str
    last_name: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
