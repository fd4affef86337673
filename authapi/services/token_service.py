"""JWT bearer token issuance and validation (HS256).

Tokens are self-contained: the profile endpoint trusts ``id`` and
``email`` from a token whose signature and ``exp`` check out, with no
server-side session.

The signing secret comes from JWT_SECRET.  A missing secret is a
deployment mistake, not a client error: it raises ConfigurationError the
first time a token is issued or verified, and the HTTP layer answers 500.
"""

from __future__ import annotations

import re
from datetime import UTC, datetime, timedelta

import jwt

from authapi.core.errors import ConfigurationError, InvalidTokenError
from authapi.models.auth import AuthClaims

ALGORITHM = "HS256"
DEFAULT_TTL = timedelta(days=7)

_DURATION_RE = re.compile(r"^(\d+)\s*([smhdw]?)$")
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
    "w": "weeks",
}


def parse_duration(raw: str) -> timedelta:
    """Parse ``"7d"``, ``"12h"``, ``"30m"``, ``"45s"`` or bare seconds."""
    match = _DURATION_RE.match(raw.strip().lower())
    if match is None:
        raise ValueError(f"invalid duration {raw!r} (expected e.g. 7d, 12h, 3600)")
    amount, unit = match.groups()
    ttl = timedelta(**{_DURATION_UNITS[unit]: int(amount)})
    if ttl <= timedelta(0):
        raise ValueError(f"duration must be positive (got {raw!r})")
    return ttl


def _require_secret(secret: str | None) -> str:
    if not secret:
        raise ConfigurationError("JWT secret not configured")
    return secret


def issue_token(
    claims: AuthClaims,
    secret: str | None,
    ttl: timedelta = DEFAULT_TTL,
) -> str:
    """Sign *claims* into a token that expires *ttl* from now."""
    key = _require_secret(secret)
    now = datetime.now(UTC)
    payload = {
        "id": claims.id,
        "email": claims.email,
        "iat": now,
        "exp": now + ttl,
    }
    return jwt.encode(payload, key, algorithm=ALGORITHM)


def verify_token(token: str, secret: str | None) -> AuthClaims:
    """Check signature and expiry and return the embedded claims.

    Pins the algorithm so a token cannot pick its own (alg:none and
    friends).  Any failure raises InvalidTokenError.
    """
    key = _require_secret(secret)
    try:
        payload = jwt.decode(
            token,
            key,
            algorithms=[ALGORITHM],
            options={"require": ["id", "email", "exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise InvalidTokenError("token expired") from None
    except jwt.InvalidTokenError as exc:
        raise InvalidTokenError(f"token rejected: {type(exc).__name__}") from None

    user_id, email = payload["id"], payload["email"]
    if not isinstance(user_id, str) or not isinstance(email, str):
        raise InvalidTokenError("token claims have the wrong type")
    return AuthClaims(id=user_id, email=email)


class TokenIssuer:
    """Signing configuration bound once at startup and injected into AuthService."""

    def __init__(self, secret: str | None, ttl: timedelta = DEFAULT_TTL) -> None:
        self._secret = secret
        self.ttl = ttl

    def issue(self, claims: AuthClaims) -> str:
        return issue_token(claims, self._secret, self.ttl)

    def verify(self, token: str) -> AuthClaims:
        return verify_token(token, self._secret)
