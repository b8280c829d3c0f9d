"""
Registration and login.

Login failures are deliberately indistinguishable: an unknown email and a
wrong password both raise the same AuthenticationError message.
"""

from __future__ import annotations

from typing import Optional

from pymongo.errors import DuplicateKeyError

from errors import AuthenticationError, ConflictError, ValidationError
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from services.token_service import TokenService
from shared.crypto import hash_password, verify_password
from shared.logging import get_logger
from shared.validators import (
    MIN_PASSWORD_LENGTH,
    as_text,
    is_valid_email,
    is_valid_password,
    normalize_email,
)

log = get_logger(__name__)

INVALID_CREDENTIALS = "Invalid email or password"

# Unknown emails are checked against this hash; every failed login runs one argon2 verify.
UNKNOWN_USER_PASSWORD_HASH = hash_password("wassl-unknown-user")


class AuthService:
    def __init__(self, users: UserRepository, tokens: TokenService) -> None:
        self._users = users
        self._tokens = tokens

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
    ) -> UserDoc:
        clean_name = as_text(name).strip()
        if not clean_name:
            raise ValidationError("name is required", field="name")
        if not email or not password:
            raise ValidationError("email and password are required")

        clean_email = normalize_email(email)
        if not is_valid_email(clean_email):
            raise ValidationError("Invalid email", field="email")
        if not is_valid_password(password):
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="password",
            )

        if await self._users.email_taken(clean_email):
            raise ConflictError("Email already exists", field="email")

        try:
            user = await self._users.create(
                clean_name, clean_email, hash_password(password)
            )
        except DuplicateKeyError:
            # Lost a race with a concurrent registration; the index decides.
            raise ConflictError("Email already exists", field="email")

        log.info("user_registered", user_id=str(user.id))
        return user

    async def login(
        self, email: Optional[str], password: Optional[str]
    ) -> tuple[str, UserDoc]:
        if not email or not password:
            raise ValidationError("email and password are required")

        user = await self._users.find_by_email(normalize_email(email))
        password_hash = user.password_hash if user is not None else UNKNOWN_USER_PASSWORD_HASH
        if not verify_password(password, password_hash) or user is None:
            log.info("login_failed", reason="invalid_credentials")
            raise AuthenticationError(INVALID_CREDENTIALS)

        token = self._tokens.issue_access_token(str(user.id), user.email)
        log.info("login_success", user_id=str(user.id))
        return token, user
