"""
Repository for the `users` collection.

All methods are async and take an async pymongo collection (AsyncCollection
or anything with the same awaitable methods). Every mutation touches exactly
one document; there are no multi-document transactions.

DuplicateKeyError from the unique email index is propagated to the caller,
which owns the mapping to an application error.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pymongo import ASCENDING, ReturnDocument

from schemas.models.base import parse_object_id
from schemas.models.user import UserDoc
from shared.datetime_utils import utcnow
from shared.logging import get_logger

log = get_logger(__name__)


class UserRepository:
    def __init__(self, collection: Any) -> None:
        self._col = collection

    async def ensure_indexes(self) -> None:
        await self._col.create_index([("email", ASCENDING)], unique=True)

    async def find_by_email(self, email: str) -> Optional[UserDoc]:
        doc = await self._col.find_one({"email": email})
        return UserDoc.from_mongo(doc)

    async def find_by_id(self, user_id: Any) -> Optional[UserDoc]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        doc = await self._col.find_one({"_id": oid})
        return UserDoc.from_mongo(doc)

    async def email_taken(self, email: str, exclude_id: Any = None) -> bool:
        query: dict = {"email": email}
        if exclude_id is not None:
            query["_id"] = {"$ne": parse_object_id(exclude_id)}
        return await self._col.find_one(query, {"_id": 1}) is not None

    async def create(self, name: str, email: str, password_hash: str) -> UserDoc:
        now = utcnow()
        user = UserDoc(
            name=name,
            email=email,
            password_hash=password_hash,
            created_at=now,
            updated_at=now,
        )
        result = await self._col.insert_one(user.to_mongo())
        user.id = result.inserted_id
        log.info("user_created", user_id=str(result.inserted_id))
        return user

    async def update_profile(
        self, user_id: Any, name: str, email: str
    ) -> Optional[UserDoc]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        doc = await self._col.find_one_and_update(
            {"_id": oid},
            {"$set": {"name": name, "email": email, "updated_at": utcnow()}},
            return_document=ReturnDocument.AFTER,
        )
        return UserDoc.from_mongo(doc)

    async def set_reset_code(
        self, user_id: Any, code_hash: str, expires_at: datetime
    ) -> None:
        """Store a pending reset, replacing any previous one."""
        await self._col.update_one(
            {"_id": parse_object_id(user_id)},
            {
                "$set": {
                    "reset_code_hash": code_hash,
                    "reset_code_expires_at": expires_at,
                    "updated_at": utcnow(),
                }
            },
        )

    async def complete_password_reset(
        self, user_id: Any, expected_code_hash: str, password_hash: str
    ) -> bool:
        """Swap in *password_hash* and clear the pending reset in one write.

        The update only applies while the stored reset hash is still
        *expected_code_hash*, so a code is consumed at most once.

        Returns:
            True if the document was updated.
        """
        result = await self._col.update_one(
            {
                "_id": parse_object_id(user_id),
                "reset_code_hash": expected_code_hash,
            },
            {
                "$set": {
                    "password_hash": password_hash,
                    "reset_code_hash": None,
                    "reset_code_expires_at": None,
                    "updated_at": utcnow(),
                }
            },
        )
        return result.matched_count == 1
