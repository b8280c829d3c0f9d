"""Request DTOs for the current-user profile endpoints."""

from __future__ import annotations

from typing import Optional

from schemas.dto.requests.auth import LenientRequest


class UpdateProfileRequest(LenientRequest):
    """Request body for PUT /api/users/me."""

    name: Optional[str] = None
    email: Optional[str] = None
