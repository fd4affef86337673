from __future__ import annotations

import asyncio
import uuid

import pytest

from authapi.core.errors import DuplicateEmailError
from authapi.models.user import NewUser
from authapi.repos.user_repo import InMemoryUserRepo

NEW = NewUser(email="a@x.com", password_hash="$argon2id$fake", first_name="A", last_name="B")


def test_create_assigns_uuid_and_defaults() -> None:
    repo = InMemoryUserRepo()
    user = asyncio.run(repo.create(NEW))

    uuid.UUID(user.id)
    assert user.is_active is True
    assert user.created_at == user.updated_at
    assert user.password_hash == "$argon2id$fake"


def test_find_by_email_and_id_return_same_user() -> None:
    repo = InMemoryUserRepo()
    user = asyncio.run(repo.create(NEW))

    assert asyncio.run(repo.find_by_email("a@x.com")) == user
    assert asyncio.run(repo.find_by_id(user.id)) == user


def test_find_missing_returns_none() -> None:
    repo = InMemoryUserRepo()
    assert asyncio.run(repo.find_by_email("nobody@x.com")) is None
    assert asyncio.run(repo.find_by_id("not-an-id")) is None


def test_create_rejects_duplicate_email() -> None:
    repo = InMemoryUserRepo()
    asyncio.run(repo.create(NEW))
    with pytest.raises(DuplicateEmailError):
        asyncio.run(repo.create(NEW))


def test_user_repr_hides_password_hash() -> None:
    user = asyncio.run(InMemoryUserRepo().create(NEW))
    assert NEW.password_hash not in repr(user)
    assert NEW.password_hash not in repr(NEW)
    assert "a@x.com" in repr(user)
