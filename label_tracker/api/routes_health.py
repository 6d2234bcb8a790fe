"""
Health check endpoints.

Basic status, plus Kubernetes-style readiness (database reachable) and
liveness probes.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from label_tracker import __version__
from label_tracker.core.config import get_settings
from label_tracker.core.database import get_db
from label_tracker.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.get("", summary="Basic Health Check")
@router.get("/", summary="Basic Health Check", include_in_schema=False)
async def health_check() -> Dict[str, Any]:
    return {
        "status": "healthy",
        "service": "label-tracker",
        "version": __version__,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": get_settings().environment,
    }


@router.get("/ready", summary="Readiness Check")
async def readiness_check(db: AsyncSession = Depends(get_db)) -> Dict[str, str]:
    """
    Readiness probe: the service can reach its database.

    Raises:
        HTTPException: 503 if the database is unreachable
    """
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error("Readiness check failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "status": "not_ready",
                "message": f"Service not ready: {e}",
            },
        )

    return {
        "status": "ready",
        "message": "Service is ready to accept traffic",
    }


@router.get("/live", summary="Liveness Check")
async def liveness_check() -> Dict[str, str]:
    """Liveness probe; does not touch the database."""
    return {
        "status": "alive",
        "message": "Service is running",
    }
