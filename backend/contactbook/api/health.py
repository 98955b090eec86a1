"""
Health check endpoints for monitoring and load balancers.

Provides:
- /health: Basic health check
- /ready: Readiness check (database reachable)
"""

import logging
from typing import Dict, Any
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from contactbook.core import database
from contactbook.core.config import settings

logger = logging.getLogger(__name__)
router = APIRouter(tags=["health"])

SERVICE_VERSION = "1.0.0"


@router.get("/health", status_code=status.HTTP_200_OK)
async def health_check() -> Dict[str, Any]:
    """
    Basic health check endpoint.

    Returns 200 if the application is running. Does not touch the database.
    """
    return {
        "status": "healthy",
        "service": settings.app_name,
        "version": SERVICE_VERSION,
    }


@router.get("/ready", status_code=status.HTTP_200_OK)
def readiness_check() -> Any:
    """
    Readiness check endpoint.

    Returns 200 when the database answers a trivial query, 503 otherwise.
    """
    checks: Dict[str, Any] = {
        "database": "unknown",
        "overall": "unknown"
    }

    try:
        with database.engine.connect() as connection:
            result = connection.execute(text("SELECT 1")).scalar()
        checks["database"] = "healthy" if result == 1 else "unhealthy"
    except SQLAlchemyError as e:
        checks["database"] = "unhealthy"
        logger.error(f"Database readiness check failed: {e}")

    if checks["database"] == "healthy":
        checks["overall"] = "ready"
        return checks

    checks["overall"] = "not ready"
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=checks
    )
