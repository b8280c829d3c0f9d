"""Read and update the authenticated user's own profile."""

from __future__ import annotations

from typing import Optional

from pymongo.errors import DuplicateKeyError

from errors import ConflictError, NotFoundError, ValidationError
from repositories.user_repository import UserRepository
from schemas.models.user import UserDoc
from shared.logging import get_logger
from shared.validators import MIN_NAME_LENGTH, as_text, is_valid_email, normalize_email

log = get_logger(__name__)


class ProfileService:
    def __init__(self, users: UserRepository) -> None:
        self._users = users

    async def get_profile(self, user_id: str) -> UserDoc:
        user = await self._users.find_by_id(user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    async def update_profile(
        self, user_id: str, name: Optional[str], email: Optional[str]
    ) -> UserDoc:
        clean_name = as_text(name).strip()
        clean_email = normalize_email(email)

        if len(clean_name) < MIN_NAME_LENGTH:
            raise ValidationError(
                f"Name must be at least {MIN_NAME_LENGTH} characters", field="name"
            )
        if not is_valid_email(clean_email):
            raise ValidationError("Invalid email", field="email")

        if await self._users.email_taken(clean_email, exclude_id=user_id):
            raise ConflictError("Email already exists", field="email")

        try:
            updated = await self._users.update_profile(user_id, clean_name, clean_email)
        except DuplicateKeyError:
            raise ConflictError("Email already exists", field="email")

        if updated is None:
            raise NotFoundError("User not found")

        log.info("profile_updated", user_id=user_id)
        return updated
