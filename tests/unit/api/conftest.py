"""Fixtures for API tests: a real app over a temporary SQLite file."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import httpx
import pytest
from fastapi import FastAPI

from keysmith.config import DatabaseConfig, SecurityConfig, Settings
from keysmith.main import create_app, lifespan


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(database=DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'keys.db'}"))


@pytest.fixture
async def app(settings: Settings) -> AsyncGenerator[FastAPI, None]:
    """App with its lifespan entered (ASGITransport does not run it)."""
    application = create_app(settings)
    async with lifespan(application):
        yield application


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[httpx.AsyncClient, None]:
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c


@pytest.fixture
def guarded_settings(settings: Settings) -> Settings:
    return settings.model_copy(update={"security": SecurityConfig(admin_token="s3cret")})
