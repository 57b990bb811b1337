"""
Liveness and database reachability endpoints for deployment checks.
"""

import logging
from fastapi import APIRouter
from app.config.firebase import get_db
from app.core.errors import AppError
from app.models.health import DatabaseHealth, ServiceHealth

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["Health"])


@router.get("", response_model=ServiceHealth)
async def health_check():
    return ServiceHealth()


@router.get("/db", response_model=DatabaseHealth)
async def database_health():
    """Lists collections to confirm the store answers; 503 when it does not."""
    try:
        count = len(list(get_db().collections()))
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        raise AppError("Database connection failed", status_code=503) from e
    return DatabaseHealth(collections_count=count)
