"""
Request DTOs for authentication endpoints.

RegisterRequest        - POST /api/auth/register
LoginRequest           - POST /api/auth/login
ForgotPasswordRequest  - POST /api/auth/forgot-password
ResetPasswordRequest   - POST /api/auth/reset-password

Fields are optional and leniently coerced to strings; presence, format and
length rules are enforced by the services so every endpoint reports the same
messages regardless of how the body was shaped.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LenientRequest(BaseModel):
    """Base for request bodies whose scalar fields are coerced to ``str``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _coerce_to_text(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (int, float, bool)):
            return str(value)
        return value


class RegisterRequest(LenientRequest):
    """Request body for POST /api/auth/register."""

    name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(LenientRequest):
    """Request body for POST /api/auth/login."""

    email: Optional[str] = None
    password: Optional[str] = None


class ForgotPasswordRequest(LenientRequest):
    """Request body for POST /api/auth/forgot-password."""

    email: Optional[str] = None


class ResetPasswordRequest(LenientRequest):
    """Request body for POST /api/auth/reset-password.

    ``newPassword`` is the wire name of ``new_password``.
    """

    email: Optional[str] = None
    code: Optional[str] = None
    new_password: Optional[str] = Field(default=None, alias="newPassword")
