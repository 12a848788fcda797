"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from userharness import __version__
from userharness.api.router import build_api_router
from userharness.config import Settings, settings
from userharness.database import close_db
from userharness.errors import AccountExistsError, AccountNotFoundError, QueryFailure

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    yield
    await close_db()


async def _not_found_handler(_request: Request, exc: AccountNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


async def _conflict_handler(_request: Request, exc: AccountExistsError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


async def _query_failure_handler(_request: Request, exc: QueryFailure) -> JSONResponse:
    logger.error(f"Query failed: {exc}")
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE, content={"detail": str(exc)}
    )


def create_app(config: Settings | None = None) -> FastAPI:
    """Build the harness API.

    The test data endpoints are mounted only when the configuration enables
    them, so a production build never exposes them.
    """
    config = config or settings

    app = FastAPI(
        title="User Harness API",
        description="Back-channel state oracle for user-management integration tests",
        version=__version__,
        lifespan=lifespan,
        docs_url="/api/docs" if not config.is_production else None,
        redoc_url=None,
        openapi_url="/api/openapi.json" if not config.is_production else None,
    )

    app.state.settings = config

    app.add_exception_handler(AccountNotFoundError, _not_found_handler)  # type: ignore[arg-type]
    app.add_exception_handler(AccountExistsError, _conflict_handler)  # type: ignore[arg-type]
    app.add_exception_handler(QueryFailure, _query_failure_handler)  # type: ignore[arg-type]

    app.include_router(build_api_router(config.test_api_enabled), prefix="/api")

    if config.test_api_enabled:
        logger.warning("Test data API is enabled at /api/test")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    from userharness.logging import get_uvicorn_log_config

    uvicorn.run(
        "userharness.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.is_development,
        log_config=get_uvicorn_log_config(),
    )
