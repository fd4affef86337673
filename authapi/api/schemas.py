"""Request / response bodies for the JSON API.

Field names are camelCase on the wire to match the SPA client.
"""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from authapi.models.auth import CreateUserData, LoginData
from authapi.models.user import UserView

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_PASSWORD_LENGTH = 8


def _normalize_email(value: str) -> str:
    email = value.strip().lower()
    if not _EMAIL_RE.match(email):
        raise ValueError("Invalid email address")
    return email


class LoginIn(BaseModel):
    email: str
    password: str = Field(min_length=1)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    def to_domain(self) -> LoginData:
        return LoginData(email=self.email, password=self.password)


class RegisterIn(BaseModel):
    email: str
    password: str = Field(min_length=MIN_PASSWORD_LENGTH)
    firstName: str = Field(min_length=1, max_length=255)
    lastName: str = Field(min_length=1, max_length=255)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return _normalize_email(value)

    @field_validator("firstName", "lastName")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    def to_domain(self) -> CreateUserData:
        return CreateUserData(
            email=self.email,
            password=self.password,
            first_name=self.firstName,
            last_name=self.lastName,
        )


class UserOut(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: str
    isActive: bool
    createdAt: datetime
    updatedAt: datetime

    @classmethod
    def from_view(cls, view: UserView) -> UserOut:
        return cls(
            id=view.id,
            email=view.email,
            firstName=view.first_name,
            lastName=view.last_name,
            isActive=view.is_active,
            createdAt=view.created_at,
            updatedAt=view.updated_at,
        )


class AuthData(BaseModel):
    token: str
    user: UserOut


class AuthResponse(BaseModel):
    success: bool = True
    message: str
    data: AuthData


class ProfileResponse(BaseModel):
    success: bool = True
    data: UserOut
