"""
ObjectId handling and the Mongo-backed base model for account documents.

User ids travel as strings (in tokens and response bodies) and are stored as
BSON ObjectIds; parse_object_id() is the single place that converts between
the two.
"""

from __future__ import annotations

from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import core_schema


class PyObjectId(ObjectId):
    """ObjectId accepted from BSON or its 24-hex string form; dumps as a string."""

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._coerce,
            serialization=core_schema.to_string_ser_schema(),
        )

    @classmethod
    def _coerce(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"not an ObjectId: {value!r}")


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return *value* as an ObjectId, or ``None`` for anything malformed.

    A token carrying a garbage id then behaves like one for a deleted user.
    """
    try:
        return PyObjectId._coerce(value)
    except ValueError:
        return None


class MongoBaseModel(BaseModel):
    """Document stored in MongoDB, with ``_id`` exposed as ``id``."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")

    def to_mongo(self) -> dict:
        """Dump for insert_one; an unset id is left out so MongoDB assigns one."""
        doc = self.model_dump(by_alias=True)
        if doc.get("_id") is None:
            doc.pop("_id", None)
        return doc

    @classmethod
    def from_mongo(cls, doc: Optional[dict]):
        """Build from a raw document; ``None`` (no match) passes through."""
        if doc is None:
            return None
        return cls.model_validate(doc)
