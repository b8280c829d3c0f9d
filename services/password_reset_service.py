"""
Password reset by emailed one-time code.

Per user the flow has two states:

    no reset  --request_reset-->  pending(code_hash, expires_at)
    pending   --request_reset-->  pending (new code replaces the old one)
    pending   --reset_password--> no reset   (correct code, not expired)

The code is only ever stored as an argon2 hash. An expired pending reset is
not cleared by reset_password; a fresh request_reset supersedes it.

When no email provider is configured the raw code can be handed back to the
caller, but only if ``expose_code`` is set. That switch is a development aid
and is off by default in production.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from errors import (
    InternalError,
    InvalidResetCodeError,
    NotFoundError,
    StateError,
    ValidationError,
)
from infrastructure.email.protocol import EmailProvider
from repositories.user_repository import UserRepository
from shared.crypto import hash_password, hash_secret, verify_secret
from shared.datetime_utils import utcnow
from shared.generators import RESET_CODE_TTL, generate_reset_code
from shared.logging import get_logger
from shared.validators import (
    MIN_PASSWORD_LENGTH,
    MIN_RESET_CODE_LENGTH,
    as_text,
    is_valid_email,
    is_valid_password,
    normalize_email,
)

log = get_logger(__name__)


@dataclass(frozen=True)
class ResetRequestResult:
    exists: bool
    code_sent: bool = False
    code: Optional[str] = None


class PasswordResetService:
    def __init__(
        self,
        users: UserRepository,
        email_provider: Optional[EmailProvider],
        *,
        expose_code: bool = False,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._users = users
        self._email = email_provider
        self._expose_code = expose_code
        self._clock = clock

    async def request_reset(self, email: Optional[str]) -> ResetRequestResult:
        clean_email = normalize_email(email)
        if not is_valid_email(clean_email):
            raise ValidationError("Invalid email", field="email")

        user = await self._users.find_by_email(clean_email)
        if user is None:
            log.info("password_reset_unknown_email")
            return ResetRequestResult(exists=False)

        if self._email is None and not self._expose_code:
            raise InternalError("Email delivery is not configured")

        code = generate_reset_code()
        expires_at = self._clock() + RESET_CODE_TTL
        await self._users.set_reset_code(user.id, hash_secret(code), expires_at)
        log.info("password_reset_requested", user_id=str(user.id))

        if self._email is None:
            log.warning("password_reset_code_exposed", user_id=str(user.id))
            return ResetRequestResult(exists=True, code=code)

        sent = await self._email.send_password_reset_email(
            clean_email, user.name, code
        )
        if not sent:
            raise InternalError("Failed to send reset code")
        return ResetRequestResult(exists=True, code_sent=True)

    async def reset_password(
        self,
        email: Optional[str],
        code: Optional[str],
        new_password: Optional[str],
    ) -> None:
        clean_email = normalize_email(email)
        clean_code = as_text(code).strip()
        password = as_text(new_password)

        if not is_valid_email(clean_email):
            raise ValidationError("Invalid email", field="email")
        if len(clean_code) < MIN_RESET_CODE_LENGTH:
            raise ValidationError("Invalid code", field="code")
        if not is_valid_password(password):
            raise ValidationError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
                field="newPassword",
            )

        user = await self._users.find_by_email(clean_email)
        if user is None:
            raise NotFoundError("Email not found")

        if not user.has_pending_reset:
            raise StateError("No reset request found")
        if user.reset_code_expired(self._clock()):
            raise StateError("Code expired")
        if not verify_secret(clean_code, user.reset_code_hash):
            log.info("password_reset_wrong_code", user_id=str(user.id))
            raise InvalidResetCodeError("Wrong code", field="code")

        updated = await self._users.complete_password_reset(
            user.id, user.reset_code_hash, hash_password(password)
        )
        if not updated:
            # Consumed or replaced by a concurrent request since we read it.
            raise StateError("No reset request found")

        log.info("password_reset_completed", user_id=str(user.id))
