"""Keysmith FastAPI application entry point."""

from __future__ import annotations

import uuid
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from keysmith import __version__
from keysmith.config import Settings, get_settings
from keysmith.db.session import Database
from keysmith.errors import KeysmithError

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("keysmith.startup", version=__version__)
    database: Database = app.state.database
    await database.init()

    yield

    # Shutdown
    logger.info("keysmith.shutdown")
    await database.close()


def create_app(
    settings: Settings | None = None,
    database: Database | None = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        settings: Settings to serve with. Defaults to ``get_settings()``.
        database: Database to open in the lifespan. Defaults to one built
            from ``settings.database``.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Keysmith",
        description="Issue and list API keys",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.database = database or Database(
        settings.database.url,
        echo=settings.database.echo,
    )

    # Request ID middleware
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """Add request ID to all requests."""
        request_id = request.headers.get("X-Request-Id") or str(uuid.uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-Id"] = request_id
        return response

    # Error handler
    @app.exception_handler(KeysmithError)
    async def keysmith_error_handler(request: Request, exc: KeysmithError):
        """Handle Keysmith errors with consistent format."""
        request_id = getattr(request.state, "request_id", None)
        logger.warning(
            "request.failed",
            path=request.url.path,
            code=exc.code,
            status_code=exc.status_code,
            request_id=request_id,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.to_dict(request_id),
        )

    # Health check
    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "version": __version__}

    from keysmith.api.v1 import router as v1_router

    app.include_router(v1_router, prefix="/v1")

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.server.host,
        port=settings.server.port,
    )
