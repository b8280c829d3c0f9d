"""
Response DTOs for authentication and profile endpoints.

PublicUser              - public identity embedded in most responses
RegisterResponse        - POST /api/auth/register  (201)
LoginResponse           - POST /api/auth/login  (200)
ForgotPasswordResponse  - POST /api/auth/forgot-password  (200)
ResetPasswordResponse   - POST /api/auth/reset-password  (200)
ProfileResponse         - GET /api/users/me  (200)
ProfileUpdateResponse   - PUT /api/users/me  (200)
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict

from schemas.models.user import UserDoc


class PublicUser(BaseModel):
    """The subset of a user record that is safe to return to clients."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    email: str

    @classmethod
    def from_doc(cls, user: UserDoc) -> "PublicUser":
        return cls(id=str(user.id), name=user.name, email=user.email)


class RegisterResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user: PublicUser


class LoginResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    token: str
    user: PublicUser


class ForgotPasswordResponse(BaseModel):
    """``code`` is only present when reset codes are exposed for development."""

    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    exists: bool
    message: Optional[str] = None
    code: Optional[str] = None


class ResetPasswordResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    message: str


class ProfileResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user: PublicUser


class ProfileUpdateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user: PublicUser
