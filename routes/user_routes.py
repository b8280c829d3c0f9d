"""
Current-user profile endpoints (bearer token required).

GET /api/users/me  - public identity of the caller
PUT /api/users/me  - update name and email
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from dependencies import get_current_user_id, get_profile_service
from schemas.dto.requests.user import UpdateProfileRequest
from schemas.dto.responses.auth import (
    ProfileResponse,
    ProfileUpdateResponse,
    PublicUser,
)
from services.profile_service import ProfileService

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/me", response_model=ProfileResponse)
async def get_me(
    user_id: str = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileResponse:
    user = await profile_service.get_profile(user_id)
    return ProfileResponse(user=PublicUser.from_doc(user))


@router.put("/me", response_model=ProfileUpdateResponse)
async def update_me(
    body: UpdateProfileRequest,
    user_id: str = Depends(get_current_user_id),
    profile_service: ProfileService = Depends(get_profile_service),
) -> ProfileUpdateResponse:
    user = await profile_service.update_profile(user_id, body.name, body.email)
    return ProfileUpdateResponse(message="Profile updated", user=PublicUser.from_doc(user))
