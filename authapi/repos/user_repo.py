from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Protocol

from authapi.core.errors import DuplicateEmailError
from authapi.models.user import NewUser, User


class UserRepo(Protocol):
    """Storage contract the auth service depends on.

    Implementations raise DuplicateEmailError from ``create`` when the
    email is taken (enforced by the store, not by a prior read) and
    StoreUnavailableError from any method when the store cannot be
    reached.  Absence is ``None``, never an exception.
    """

    async def find_by_email(self, email: str) -> User | None: ...
    async def find_by_id(self, user_id: str) -> User | None: ...
    async def create(self, data: NewUser) -> User: ...


class InMemoryUserRepo:
    def __init__(self) -> None:
        self._by_email: dict[str, User] = {}
        self._by_id: dict[str, User] = {}

    async def find_by_email(self, email: str) -> User | None:
        return self._by_email.get(email)

    async def find_by_id(self, user_id: str) -> User | None:
        return self._by_id.get(user_id)

    async def create(self, data: NewUser) -> User:
        if data.email in self._by_email:
            raise DuplicateEmailError(f"email already exists: {data.email}")

        now = datetime.now(UTC)
        user = User(
            id=str(uuid.uuid4()),
            email=data.email,
            password_hash=data.password_hash,
            first_name=data.first_name,
            last_name=data.last_name,
            is_active=True,
            created_at=now,
            updated_at=now,
        )
        self._by_email[user.email] = user
        self._by_id[user.id] = user
        return user
