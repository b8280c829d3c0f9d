"""
User document model.

Maps to the `users` MongoDB collection.

reset_code_hash / reset_code_expires_at describe an outstanding password
reset. They are written and cleared together: both set means a reset is
pending, both None means none is. A pending reset whose expiry has passed is
logically dead even while the fields are still stored.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from schemas.models.base import MongoBaseModel
from shared.datetime_utils import ensure_utc


class UserDoc(MongoBaseModel):
    """Document model for the `users` collection."""

    name: str
    email: str
    password_hash: str
    reset_code_hash: Optional[str] = None
    reset_code_expires_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def has_pending_reset(self) -> bool:
        return bool(self.reset_code_hash) and self.reset_code_expires_at is not None

    def reset_code_expired(self, now: datetime) -> bool:
        expires_at = ensure_utc(self.reset_code_expires_at)
        return expires_at is None or now > expires_at
