"""
HTTP middleware for request logging and response headers.

Provides:
- Request ID generation for correlation (echoed as X-Request-ID)
- request_id/method/path bound into structlog contextvars for the request
- request_completed log line with status code and timing
- The fixed backend identification header on every response
"""

import time
import uuid
from typing import Mapping

import structlog
from fastapi import FastAPI, Request

from shared.logging import get_logger


def generate_request_id() -> str:
    """Generate a unique request ID for correlation."""
    return f"req_{uuid.uuid4().hex[:12]}"


def log_request_end(
    log: structlog.stdlib.BoundLogger,
    status_code: int,
    duration_ms: int,
) -> None:
    """Log the end of a request with timing and status."""
    if status_code >= 500:
        log_fn = log.error
    elif status_code >= 400:
        log_fn = log.warning
    else:
        log_fn = log.info

    log_fn("request_completed", status_code=status_code, duration_ms=duration_ms)


def setup_request_middleware(app: FastAPI, response_headers: Mapping[str, str]) -> None:
    """Register the logging/header middleware on *app*.

    Exceptions are logged and re-raised so the error handlers still produce
    the response.
    """
    log = get_logger("wassl.request")

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        start = time.perf_counter()
        request_id = generate_request_id()

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        log.debug("request_started")

        try:
            response = await call_next(request)
        except Exception as exc:
            log.error(
                "request_failed",
                error=str(exc),
                error_type=type(exc).__name__,
                duration_ms=int((time.perf_counter() - start) * 1000),
            )
            raise

        log_request_end(log, response.status_code, int((time.perf_counter() - start) * 1000))

        response.headers["X-Request-ID"] = request_id
        for name, value in response_headers.items():
            response.headers[name] = value
        return response
