"""JSON auth endpoints (/api/auth/register, /api/auth/login).

Both answer { success, message, data: { token, user } } so the client can
keep the token and render the profile without a second round trip.
Failures surface as classified AuthErrors and are rendered by the
handlers in authapi/api/errors.py.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from authapi.api.dependencies import get_auth_service
from authapi.api.schemas import AuthData, AuthResponse, LoginIn, RegisterIn, UserOut
from authapi.models.auth import AuthResult
from authapi.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _auth_response(message: str, result: AuthResult) -> AuthResponse:
    return AuthResponse(
        message=message,
        data=AuthData(token=result.token, user=UserOut.from_view(result.user)),
    )


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    payload: RegisterIn,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    result = await service.register(payload.to_domain())
    return _auth_response("User registered successfully", result)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginIn,
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    result = await service.login(payload.to_domain())
    return _auth_response("Login successful", result)
