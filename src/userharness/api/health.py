"""Health check endpoints."""

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text

from userharness.api.deps import ProviderDep

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("")
async def health_check():
    """Basic health check - just confirms the service is running."""
    return {"status": "ok"}


@router.get("/db")
async def health_check_db(connections: ProviderDep):
    """Health check with connectivity to the user-management database."""
    try:
        async with connections.open() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "ok", "database": "connected"}
    except Exception as e:
        logger.error(f"Database health check failed: {e!r}")
        return JSONResponse(
            status_code=503,
            content={"status": "error", "database": "disconnected"},
        )
