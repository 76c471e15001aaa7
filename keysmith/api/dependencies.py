"""FastAPI dependencies for the Keysmith API.

Provides dependency injection for:
- Database sessions
- The API key store
- Key creation guard
"""

from __future__ import annotations

import hmac
from collections.abc import AsyncGenerator
from typing import Annotated

import structlog
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from keysmith.config import Settings
from keysmith.db.session import Database
from keysmith.errors import UnauthorizedError
from keysmith.services.api_key import ApiKeyStore

logger = structlog.get_logger()


def get_app_settings(request: Request) -> Settings:
    """Settings the app was created with."""
    return request.app.state.settings


def get_database(request: Request) -> Database:
    """Database opened by the app lifespan."""
    return request.app.state.database


async def get_session_dependency(
    database: Annotated[Database, Depends(get_database)],
) -> AsyncGenerator[AsyncSession, None]:
    """Yield a database session for the duration of one request."""
    async with database.session() as session:
        yield session


SessionDep = Annotated[AsyncSession, Depends(get_session_dependency)]


async def get_api_key_store(
    session: SessionDep,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> ApiKeyStore:
    """Get ApiKeyStore with injected dependencies."""
    return ApiKeyStore(db_session=session, config=settings.keys)


def require_admin_token(
    request: Request,
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> None:
    """Guard key creation when an admin token is configured.

    With ``security.admin_token`` unset, creation is open.

    Raises:
        UnauthorizedError: If a token is configured and the request does not
            present it as a Bearer token
    """
    expected = settings.security.admin_token
    if not expected:
        return

    auth_header = request.headers.get("Authorization", "")
    if auth_header.startswith("Bearer "):
        token = auth_header[7:]
        if hmac.compare_digest(token.encode(), expected.encode()):
            return
        logger.debug("auth.rejected", reason="token_mismatch")
        raise UnauthorizedError("Invalid admin token")

    logger.debug("auth.rejected", reason="missing_token")
    raise UnauthorizedError("Authentication required")


# Type aliases for cleaner dependency injection
ApiKeyStoreDep = Annotated[ApiKeyStore, Depends(get_api_key_store)]
AdminDep = Annotated[None, Depends(require_admin_token)]
