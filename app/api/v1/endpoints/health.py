"""
Health check endpoints
"""

from typing import Any
import logging
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from redis.exceptions import RedisError

from app.core.database import get_session
from app.core.redis import redis_manager
from app.config import settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/live")
async def liveness() -> Any:
    """
    Liveness probe
    """
    return {"status": "alive", "service": settings.APP_NAME}


@router.get("/ready")
async def readiness(
    db: AsyncSession = Depends(get_session)
) -> Any:
    """
    Readiness probe: the database must answer; redis only matters when
    rate limiting is on, and the limiter fails open without it
    """
    checks = {"database": False}

    try:
        result = await db.execute(text("SELECT 1"))
        checks["database"] = result.scalar() == 1
    except SQLAlchemyError as e:
        logger.error(f"Database readiness check failed: {e}")

    if settings.RATE_LIMIT_ENABLED:
        try:
            client = await redis_manager.get_client()
            await client.ping()
            checks["redis"] = True
        except (RedisError, OSError) as e:
            logger.warning(f"Redis readiness check failed: {e}")
            checks["redis"] = False

    ready = checks["database"]
    body = {
        "status": "ready" if ready else "not ready",
        "checks": checks,
        "version": settings.APP_VERSION,
    }
    return JSONResponse(status_code=200 if ready else 503, content=body)
