"""
Liveness and health endpoints.

GET /       - static liveness message
GET /ping   - static pong
GET /health - checks MongoDB connectivity; 503 when the database is unreachable.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from schemas.dto.responses.common import HealthResponse, StatusResponse

router = APIRouter(tags=["health"])


@router.get("/", response_model=StatusResponse)
async def root() -> StatusResponse:
    return StatusResponse(ok=True, message="Wassl API is running")


@router.get("/ping", response_model=StatusResponse)
async def ping() -> StatusResponse:
    return StatusResponse(ok=True, message="pong")


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        db = request.app.state.db
        await db.client.admin.command("ping")
        checks["mongodb"] = "ok"
    except Exception:
        checks["mongodb"] = "error"
        overall = "unhealthy"

    email_provider = getattr(request.app.state, "email_provider", None)
    checks["email"] = "configured" if email_provider is not None else "not_configured"

    body = HealthResponse(status=overall, checks=checks)
    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(status_code=status_code, content=body.model_dump())
