from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from authapi.core.errors import MissingTokenError
from authapi.middleware.request_context import user_id_var
from authapi.models.auth import AuthClaims
from authapi.services.auth_service import AuthService
from authapi.services.token_service import TokenIssuer

logger = logging.getLogger(__name__)

# auto_error=False so a missing header raises our own classified 401
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def get_auth_service(request: Request) -> AuthService:
    return request.app.state.auth_service


def get_token_issuer(request: Request) -> TokenIssuer:
    return request.app.state.token_issuer


async def require_user(
    raw_token: Annotated[str | None, Depends(oauth2_scheme)],
    tokens: Annotated[TokenIssuer, Depends(get_token_issuer)],
) -> AuthClaims:
    """Validate the bearer token and return its claims.

    Raises MissingTokenError / InvalidTokenError; the app's exception
    handlers turn both into 401 responses.
    """
    if not raw_token:
        raise MissingTokenError()

    claims = tokens.verify(raw_token)
    user_id_var.set(claims.id)
    logger.debug("Token validated for user=%s", claims.id)
    return claims
