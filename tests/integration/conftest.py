"""
Integration test fixtures.

Apps are built with create_app() and a test lifespan that injects the
mongomock-backed database and an optional email provider, so no real
network connections are made.
"""

from contextlib import asynccontextmanager
from typing import Optional

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from app import create_app
from config import AppSettings
from repositories.user_repository import UserRepository


@pytest.fixture
def settings(monkeypatch) -> AppSettings:
    monkeypatch.setenv("ENV", "development")
    monkeypatch.setenv("JWT_SECRET", "integration-secret")
    monkeypatch.delenv("EXPOSE_RESET_CODE", raising=False)
    return AppSettings()


@pytest.fixture
def make_app(mock_db, settings):
    def _make(
        app_settings: Optional[AppSettings] = None,
        email_provider=None,
        db=None,
    ) -> FastAPI:
        app_settings = app_settings or settings
        database = db if db is not None else mock_db

        @asynccontextmanager
        async def lifespan(app: FastAPI):
            app.state.settings = app_settings
            app.state.db = database
            app.state.email_provider = email_provider
            if db is None:
                await UserRepository(database["users"]).ensure_indexes()
            yield

        return create_app(app_settings, lifespan=lifespan)

    return _make


@pytest.fixture
def client(make_app):
    with TestClient(make_app()) as c:
        yield c
