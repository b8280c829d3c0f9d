"""
Common response DTOs shared across multiple endpoints.

ErrorResponse   - standard error shape from AppError.to_dict()
StatusResponse  - GET / and GET /ping
HealthResponse  - GET /health
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict


class ErrorResponse(BaseModel):
    """Standard error JSON body produced by the AppError exception handler."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    code: str
    field: Optional[str] = None
    details: Optional[Any] = None


class StatusResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: bool
    message: str


class HealthResponse(BaseModel):
    """Response body for GET /health."""

    model_config = ConfigDict(populate_by_name=True)

    status: str
    checks: dict[str, str]
