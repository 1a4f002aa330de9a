import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from taskboard.config import settings
from taskboard.database import Database
from taskboard.dependencies import get_database

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
async def health(database: Database = Depends(get_database)):
    """Liveness plus a database ping."""
    try:
        await database.ping()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Health check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "status": "unhealthy",
                "database": "disconnected",
                "error": str(exc),
                "timestamp": _now(),
            },
        )

    return {
        "status": "healthy",
        "database": "connected",
        "timestamp": _now(),
        "version": settings.APP_VERSION,
    }


@router.get("/ready")
async def ready(database: Database = Depends(get_database)):
    """Readiness: the users table must be queryable, not just the server reachable."""
    try:
        users_count = await database.count_users()
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("Readiness check failed: %s", exc)
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "NOT_READY",
                "database": "error",
                "error": str(exc),
                "timestamp": _now(),
            },
        )

    return {
        "status": "READY",
        "database": "connected",
        "users_count": users_count,
        "timestamp": _now(),
    }
