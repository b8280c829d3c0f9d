"""
Authentication endpoints under /api/auth.

POST /api/auth/register         - create an account (201)
POST /api/auth/login            - exchange credentials for a bearer token
POST /api/auth/forgot-password  - issue a one-time reset code
POST /api/auth/reset-password   - consume the code and set a new password
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from dependencies import (
    get_auth_service,
    get_password_reset_service,
)
from schemas.dto.requests.auth import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
)
from schemas.dto.responses.auth import (
    ForgotPasswordResponse,
    LoginResponse,
    PublicUser,
    RegisterResponse,
    ResetPasswordResponse,
)
from services.auth_service import AuthService
from services.password_reset_service import PasswordResetService

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    body: RegisterRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> RegisterResponse:
    user = await auth_service.register(body.name, body.email, body.password)
    return RegisterResponse(message="Account created", user=PublicUser.from_doc(user))


@router.post("/login", response_model=LoginResponse)
async def login(
    body: LoginRequest,
    auth_service: AuthService = Depends(get_auth_service),
) -> LoginResponse:
    token, user = await auth_service.login(body.email, body.password)
    return LoginResponse(
        message="Logged in", token=token, user=PublicUser.from_doc(user)
    )


@router.post(
    "/forgot-password",
    response_model=ForgotPasswordResponse,
    response_model_exclude_none=True,
)
async def forgot_password(
    body: ForgotPasswordRequest,
    reset_service: PasswordResetService = Depends(get_password_reset_service),
) -> ForgotPasswordResponse:
    result = await reset_service.request_reset(body.email)
    if not result.exists:
        return ForgotPasswordResponse(ok=True, exists=False)
    if result.code_sent:
        return ForgotPasswordResponse(ok=True, exists=True, message="Code sent")
    return ForgotPasswordResponse(
        ok=True,
        exists=True,
        message="Dev mode: SMTP not configured",
        code=result.code,
    )


@router.post("/reset-password", response_model=ResetPasswordResponse)
async def reset_password(
    body: ResetPasswordRequest,
    reset_service: PasswordResetService = Depends(get_password_reset_service),
) -> ResetPasswordResponse:
    await reset_service.reset_password(body.email, body.code, body.new_password)
    return ResetPasswordResponse(ok=True, message="Password updated")
