"""Profile endpoint.

GET /api/users/profile: the authenticated user's own record.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from authapi.api.dependencies import get_auth_service, require_user
from authapi.api.schemas import ProfileResponse, UserOut
from authapi.models.auth import AuthClaims
from authapi.services.auth_service import AuthService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/profile", response_model=ProfileResponse)
async def get_my_profile(
    claims: Annotated[AuthClaims, Depends(require_user)],
    service: Annotated[AuthService, Depends(get_auth_service)],
) -> ProfileResponse:
    """Load the profile named by the token's ``id`` claim.

    A valid token for a user that no longer exists yields 404.
    """
    view = await service.get_user_by_id(claims.id)
    return ProfileResponse(data=UserOut.from_view(view))
