"""
Health check API endpoints.

Routes: GET /health, GET /health/config

Dependencies: sqlalchemy, ragchat.configs, ragchat.boundary
System role: Health check HTTP API
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ragchat.api.deps import get_settings_dependency
from ragchat.boundary.db import get_async_db
from ragchat.configs import Settings
from ragchat.models.health import ConfigCheckResponse, HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", service="ragchat")


@router.get("/config", response_model=ConfigCheckResponse)
async def config_check(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
) -> ConfigCheckResponse:
    """
    Report whether the model provider is configured and the database answers.

    Always returns 200; each dependency is reported as a boolean.
    """
    try:
        await db.execute(text("SELECT 1"))
        database_ok = True
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"{__name__}:config_check - Database check failed: {type(e).__name__}: {e}")
        database_ok = False

    return ConfigCheckResponse(
        provider=settings.providers.is_configured,
        database=database_ok,
    )
