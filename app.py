"""
FastAPI application factory.
create_app() is the single entry point for building the app.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional

import sentry_sdk
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.asynchronous.mongo_client import AsyncMongoClient
from pymongo.errors import PyMongoError

from config import AppSettings
from errors import register_error_handlers
from infrastructure.email.smtp import build_email_provider
from middleware.request_logging import setup_request_middleware
from repositories.user_repository import UserRepository
from routes.auth_routes import router as auth_router
from routes.health_routes import router as health_router
from routes.user_routes import router as user_router
from shared.logging import get_logger, setup_logging

Lifespan = Callable[[FastAPI], AsyncContextManager[None]]

log = get_logger(__name__)


def _warn_about_insecure_defaults(settings: AppSettings) -> None:
    if settings.jwt.uses_default_secret:
        log.warning(
            "jwt_default_secret_in_use",
            hint="set JWT_SECRET (or RS256 keys) before deploying",
        )
    if settings.expose_reset_code and not settings.smtp.is_configured:
        log.warning(
            "reset_codes_exposed_in_responses",
            hint="configure SMTP or set EXPOSE_RESET_CODE=false",
        )


def _default_lifespan(settings: AppSettings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        # ── Startup ──────────────────────────────────────────────────────────
        mongo_client: AsyncMongoClient = AsyncMongoClient(
            settings.db.mongo_uri, tz_aware=True
        )
        app.state.mongo_client = mongo_client
        app.state.db = mongo_client[settings.db.db_name]
        app.state.settings = settings
        app.state.email_provider = build_email_provider(
            settings.smtp, app_name=settings.app_name
        )

        # The API keeps serving if MongoDB is down at boot; /health reports it.
        try:
            await UserRepository(app.state.db["users"]).ensure_indexes()
            log.info("mongodb_connected", db_name=settings.db.db_name)
        except PyMongoError as e:
            log.error("mongodb_connection_error", error=str(e))

        log.info(
            "backend_started",
            host=settings.host,
            port=settings.port,
            email_enabled=app.state.email_provider is not None,
        )

        yield

        # ── Shutdown ─────────────────────────────────────────────────────────
        await mongo_client.close()
        log.info("mongodb_connection_closed")

    return lifespan


def create_app(
    settings: Optional[AppSettings] = None,
    *,
    lifespan: Optional[Lifespan] = None,
) -> FastAPI:
    """Create and return a fully configured FastAPI application.

    ``lifespan`` replaces the default MongoDB/SMTP startup; it must populate
    ``app.state.settings``, ``app.state.db`` and ``app.state.email_provider``.
    """
    if settings is None:
        settings = AppSettings()

    setup_logging(settings.logging.log_level, settings.logging.log_format, settings.env)

    # Initialise Sentry before anything else so it captures startup errors
    if settings.sentry.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry.sentry_dsn,
            send_default_pii=settings.sentry.sentry_send_pii,
            traces_sample_rate=settings.sentry.sentry_traces_sample_rate,
            environment=settings.env,
        )

    _warn_about_insecure_defaults(settings)

    app = FastAPI(
        title=f"{settings.app_name} API",
        version="1.0.0",
        docs_url=settings.docs_url,
        redoc_url=None,
        lifespan=lifespan or _default_lifespan(settings),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Added after CORS so it wraps it and stamps preflight responses too.
    setup_request_middleware(app, settings.backend_headers)

    register_error_handlers(
        app,
        extra_headers=settings.backend_headers,
        expose_details=not settings.is_production,
    )
    app.include_router(health_router)
    app.include_router(auth_router)
    app.include_router(user_router)

    return app
