from __future__ import annotations

import sys
from dataclasses import replace
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from authapi.core.config import SETTINGS, Settings
from authapi.main import create_app
from authapi.repos.user_repo import InMemoryUserRepo
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenIssuer

# Ensure repo root is on sys.path so `import authapi` works under pytest.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_SECRET = "test-signing-secret-with-at-least-32-bytes!"

REGISTER_BODY = {
    "email": "a@x.com",
    "password": "pw123456",
    "firstName": "A",
    "lastName": "B",
}


def make_settings(**overrides: object) -> Settings:
    base = replace(
        SETTINGS,
        app_env="test",
        jwt_secret=TEST_SECRET,
        jwt_expires_in="7d",
    )
    return replace(base, **overrides)  # type: ignore[arg-type]


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def user_repo() -> InMemoryUserRepo:
    return InMemoryUserRepo()


@pytest.fixture
def token_issuer() -> TokenIssuer:
    return TokenIssuer(TEST_SECRET)


@pytest.fixture
def auth_service(user_repo: InMemoryUserRepo, token_issuer: TokenIssuer) -> AuthService:
    return AuthService(user_repo, token_issuer)


@pytest.fixture
def client(settings: Settings, user_repo: InMemoryUserRepo) -> TestClient:
    return TestClient(create_app(settings, user_repo=user_repo))


def register(client: TestClient, **overrides: str) -> dict:
    """POST /api/auth/register and return the response JSON (asserts 201)."""
    resp = client.post("/api/auth/register", json={**REGISTER_BODY, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}
