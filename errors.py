"""
Application error hierarchy and FastAPI exception handlers.

AppError is the base for all typed errors. The global exception handler
converts AppError subclasses to consistent JSON responses carrying a
``message`` field. Router-level HTTP errors (unknown path, wrong method)
are rendered in the same shape.

Non-AppError exceptions are converted to a generic 500 ``Server error`` body
(with Sentry reporting when it is enabled). Nothing escapes unconverted.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from schemas.dto.responses.common import ErrorResponse
from shared.logging import get_logger

log = get_logger(__name__)

HTTP_ERROR_CODES = {
    404: "not_found",
    405: "method_not_allowed",
}


class AppError(Exception):
    """Base application error. All typed errors inherit from this."""

    status_code: int = 500
    error_code: str = "internal_error"

    def __init__(
        self,
        message: str,
        *,
        field: Optional[str] = None,
        details: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.field = field
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"message": self.message, "code": self.error_code}
        if self.field is not None:
            payload["field"] = self.field
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    status_code = 400
    error_code = "validation_error"


class AuthenticationError(AppError):
    status_code = 401
    error_code = "authentication_error"


class InvalidResetCodeError(AuthenticationError):
    """A reset code that does not match the pending one (reported as 400)."""

    status_code = 400
    error_code = "invalid_code"


class NotFoundError(AppError):
    status_code = 404
    error_code = "not_found"


class ConflictError(AppError):
    status_code = 409
    error_code = "conflict"


class StateError(AppError):
    """Operation is not valid for the account's current password-reset state."""

    status_code = 400
    error_code = "invalid_state"


class InternalError(AppError):
    status_code = 500
    error_code = "internal_error"


def register_error_handlers(
    app: FastAPI,
    *,
    extra_headers: Optional[Mapping[str, str]] = None,
    expose_details: bool = True,
) -> None:
    """Register global exception handlers on the FastAPI app.

    ``extra_headers`` are attached to the 500 response explicitly because the
    catch-all handler runs outside the HTTP middleware stack.
    """
    headers = dict(extra_headers or {})

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if exc.status_code >= 500:
            log.error(
                "app_error",
                path=request.url.path,
                error=exc.message,
                error_code=exc.error_code,
            )
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        body = ErrorResponse(
            message=str(exc.detail),
            code=HTTP_ERROR_CODES.get(exc.status_code, "http_error"),
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=body.model_dump(exclude_none=True),
            headers=exc.headers,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        err = ValidationError("Invalid request body")
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        # Sentry integration: if sentry_sdk is initialized it will auto-capture
        # unhandled exceptions before this handler fires.
        log.error(
            "unhandled_exception",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
            exc_info=exc,
        )
        content: dict = {"message": "Server error", "code": "internal_error"}
        if expose_details:
            content["error"] = str(exc)
        return JSONResponse(status_code=500, content=content, headers=headers)
