"""API router assembly."""

from fastapi import APIRouter

from userharness.api import health, testdata


def build_api_router(include_test_api: bool) -> APIRouter:
    """Aggregate route modules; the test data API only when asked for."""
    api_router = APIRouter()
    api_router.include_router(health.router, prefix="/health", tags=["health"])

    if include_test_api:
        api_router.include_router(testdata.router, prefix="/test", tags=["test"])

    return api_router
