"""Auth service: register, login and profile lookup.

Pure business logic with no HTTP or driver dependencies.  The storage
adapter and token issuer are injected, so the same code runs unchanged
on the document backend, the relational backend, or the in-memory repo
used in tests.

Every failure leaves as an AuthError subclass.  Adapter errors are
already classified and pass straight through; anything else raised by
an adapter is a bug in that adapter and is wrapped as
StoreUnavailableError rather than leaking a driver exception.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from typing import TypeVar

from authapi.core.errors import (
    AuthError,
    DuplicateEmailError,
    InvalidCredentialsError,
    StoreUnavailableError,
    UserNotFoundError,
    ValidationError,
)
from authapi.core.metrics import AUTH_OPERATIONS
from authapi.models.auth import AuthClaims, AuthResult, CreateUserData, LoginData
from authapi.models.user import NewUser, User, UserView
from authapi.repos.user_repo import UserRepo
from authapi.services import password_service
from authapi.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AuthService:
    def __init__(self, repo: UserRepo, tokens: TokenIssuer) -> None:
        self._repo = repo
        self._tokens = tokens

    async def register(self, data: CreateUserData) -> AuthResult:
        try:
            if not data.password:
                raise ValidationError("password must be non-empty")

            password_hash = await password_service.hash_password_async(data.password)

            if await self._store(self._repo.find_by_email(data.email)) is not None:
                raise DuplicateEmailError(f"email already registered: {data.email}")

            user = await self._store(
                self._repo.create(
                    NewUser(
                        email=data.email,
                        password_hash=password_hash,
                        first_name=data.first_name,
                        last_name=data.last_name,
                    )
                )
            )
            result = self._issue(user)
        except AuthError as exc:
            self._record("register", exc)
            logger.warning("Registration rejected  email=%s kind=%s", data.email, exc.kind)
            raise

        self._record("register")
        logger.info("User registered  user_id=%s email=%s", user.id, user.email)
        return result

    async def login(self, data: LoginData) -> AuthResult:
        try:
            user = await self._store(self._repo.find_by_email(data.email))
            if user is None:
                await password_service.burn_verify_async(data.password)
                raise InvalidCredentialsError("unknown email")

            if not await password_service.verify_password_async(
                data.password, user.password_hash
            ):
                raise InvalidCredentialsError("password mismatch")

            if not user.is_active:
                raise InvalidCredentialsError("user is inactive")

            result = self._issue(user)
        except AuthError as exc:
            self._record("login", exc)
            # exc.detail says which check failed; it stays in the logs only
            logger.warning("Login failed  email=%s reason=%s", data.email, exc.detail)
            raise

        self._record("login")
        logger.info("Login succeeded  user_id=%s", user.id)
        return result

    async def get_user_by_id(self, user_id: str) -> UserView:
        try:
            user = await self._store(self._repo.find_by_id(user_id))
            if user is None:
                raise UserNotFoundError(f"no user with id {user_id}")
        except AuthError as exc:
            self._record("get_user", exc)
            logger.warning("User lookup failed  user_id=%s kind=%s", user_id, exc.kind)
            raise

        self._record("get_user")
        return user.to_view()

    def _issue(self, user: User) -> AuthResult:
        token = self._tokens.issue(AuthClaims(id=user.id, email=user.email))
        return AuthResult(token=token, user=user.to_view())

    @staticmethod
    async def _store(call: Awaitable[T]) -> T:
        try:
            return await call
        except AuthError:
            raise
        except Exception as exc:
            logger.exception("Storage adapter raised an unclassified error")
            raise StoreUnavailableError(type(exc).__name__) from exc

    @staticmethod
    def _record(operation: str, exc: AuthError | None = None) -> None:
        AUTH_OPERATIONS.labels(
            operation=operation,
            outcome="ok" if exc is None else exc.kind,
        ).inc()
