from __future__ import annotations

from dataclasses import dataclass

from authapi.models.user import UserView


@dataclass(frozen=True, slots=True)
class CreateUserData:
    email: str
    password: str
    first_name: str
    last_name: str

    def __repr__(self) -> str:
        # Keep the plaintext password out of logs and tracebacks
        return (
            f"CreateUserData(email={self.email!r}, first_name={self.first_name!r}, "
            f"last_name={self.last_name!r}, password='***')"
        )


@dataclass(frozen=True, slots=True)
class LoginData:
    email: str
    password: str

    def __repr__(self) -> str:
        return f"LoginData(email={self.email!r}, password='***')"


@dataclass(frozen=True, slots=True)
class AuthClaims:
    """Identity payload embedded in an issued token."""

    id: str
    email: str


@dataclass(frozen=True, slots=True)
class AuthResult:
    token: str
    user: UserView
