"""
FastAPI dependency providers.

Process-wide resources (settings, database, email provider) live on
app.state and are created by the application lifespan; everything else is
built per request from them, so tests can swap any of it by building the
app with their own lifespan.
"""

from __future__ import annotations

from typing import Optional

import jwt
import structlog
from fastapi import Depends, Request

from config import AppSettings
from errors import AuthenticationError
from infrastructure.email.protocol import EmailProvider
from repositories.user_repository import UserRepository
from services.auth_service import AuthService
from services.password_reset_service import PasswordResetService
from services.profile_service import ProfileService
from services.token_service import TokenService


def get_settings(request: Request) -> AppSettings:
    """Return the AppSettings instance stored on app.state."""
    return request.app.state.settings


async def get_db(request: Request):
    """Return the async MongoDB database from app.state."""
    return request.app.state.db


def get_email_provider(request: Request) -> Optional[EmailProvider]:
    """Return the configured email provider (None when SMTP is not configured)."""
    return getattr(request.app.state, "email_provider", None)


async def get_user_repository(db=Depends(get_db)) -> UserRepository:
    return UserRepository(db["users"])


def get_token_service(settings: AppSettings = Depends(get_settings)) -> TokenService:
    return TokenService(settings.jwt)


async def get_auth_service(
    users: UserRepository = Depends(get_user_repository),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(users, tokens)


async def get_profile_service(
    users: UserRepository = Depends(get_user_repository),
) -> ProfileService:
    return ProfileService(users)


async def get_password_reset_service(
    users: UserRepository = Depends(get_user_repository),
    email_provider: Optional[EmailProvider] = Depends(get_email_provider),
    settings: AppSettings = Depends(get_settings),
) -> PasswordResetService:
    return PasswordResetService(
        users, email_provider, expose_code=bool(settings.expose_reset_code)
    )


def extract_bearer_token(authorization: Optional[str]) -> str:
    """Return the token from an ``Authorization: Bearer <token>`` header, or ""."""
    header = authorization or ""
    if not header.startswith("Bearer "):
        return ""
    return header[len("Bearer "):].strip()


async def get_current_user_id(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> str:
    """Authentication guard: verify the bearer token and return its user id.

    Purely stateless; the user record is not looked up here.
    """
    token = extract_bearer_token(request.headers.get("Authorization"))
    if not token:
        raise AuthenticationError("Missing token")

    try:
        claims = tokens.verify_access_token(token)
    except jwt.PyJWTError:
        raise AuthenticationError("Invalid or expired token")

    user_id = str(claims["id"])
    structlog.contextvars.bind_contextvars(user_id=user_id)
    return user_id
