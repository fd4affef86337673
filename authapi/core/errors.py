"""Classified errors raised by the auth core.

Every failure that can leave the service belongs to this closed set.  Each
class carries a stable ``kind`` discriminator, the HTTP status it maps to,
and a fixed public message.  Route handlers never inspect message text;
they dispatch on the class (or ``kind``).

Internal detail (driver errors, stack traces) may be chained via
``raise ... from exc`` for logging, but is never part of ``message``.
"""

from __future__ import annotations

from typing import ClassVar


class AuthError(Exception):
    """Base class for all classified auth errors."""

    kind: ClassVar[str] = "internal_error"
    status_code: ClassVar[int] = 500
    message: ClassVar[str] = "Internal server error"

    def __init__(self, detail: str | None = None) -> None:
        # detail is for logs only; the public message is fixed per class
        self.detail = detail
        super().__init__(detail or self.message)


class ValidationError(AuthError):
    kind = "validation_error"
    status_code = 400
    message = "Validation error"


class DuplicateEmailError(AuthError):
    kind = "duplicate_email"
    status_code = 409
    message = "User already exists"


class InvalidCredentialsError(AuthError):
    """Unknown email and wrong password both raise this, indistinguishably."""

    kind = "invalid_credentials"
    status_code = 401
    message = "Invalid credentials"


class UserNotFoundError(AuthError):
    kind = "user_not_found"
    status_code = 404
    message = "User not found"


class StoreUnavailableError(AuthError):
    kind = "store_unavailable"
    status_code = 500
    message = "Database connection not available"


class ConfigurationError(AuthError):
    kind = "configuration_error"
    status_code = 500
    message = "Server misconfigured"


class InvalidTokenError(AuthError):
    kind = "invalid_token"
    status_code = 401
    message = "Invalid or expired token"


class MissingTokenError(AuthError):
    kind = "missing_token"
    status_code = 401
    message = "Access token required"


class PasswordHashError(AuthError):
    """The hashing primitive itself failed, e.g. a malformed stored hash."""

    kind = "internal_error"
    status_code = 500
    message = "Internal server error"
