"""
Health Check Endpoints

- /health/live  - Basic liveness (app is running)
- /health/ready - Readiness check (database reachable, rate limit store state)
"""

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from datetime import datetime
from typing import Dict, Any
import time

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from edupro.core.config import settings
from edupro.core.database import get_session_local
from edupro.core.logging_config import logger
from edupro.core.rate_limiter import check_rate_limit_storage


router = APIRouter(prefix="/health", tags=["Health Checks"])


async def check_database() -> Dict[str, Any]:
    """Check database connectivity and that the admins table is readable"""
    start = time.time()
    try:
        session_factory = get_session_local()
        async with session_factory() as session:
            await session.execute(text("SELECT 1"))
            await session.execute(text("SELECT COUNT(*) FROM admins"))

        return {
            "status": "healthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "message": "Database connection successful"
        }
    except (SQLAlchemyError, OSError) as e:
        logger.error(f"[HealthCheck] Database check failed: {e}")
        return {
            "status": "unhealthy",
            "latency_ms": round((time.time() - start) * 1000, 2),
            "error": str(e),
            "message": "Database connection failed"
        }


@router.get("/live")
async def liveness_check():
    """Liveness probe - 200 while the process is alive"""
    return {
        "status": "alive",
        "timestamp": datetime.utcnow().isoformat(),
        "app": settings.APP_NAME,
    }


@router.get("/ready")
async def readiness_check():
    """
    Readiness probe - 200 only if the database answers.

    Redis is reported but never blocks readiness; limits fall back to memory.
    """
    db_check = await check_database()
    redis_ok = await check_rate_limit_storage(settings.REDIS_URL)

    is_ready = db_check["status"] == "healthy"
    body = {
        "status": "ready" if is_ready else "not_ready",
        "timestamp": datetime.utcnow().isoformat(),
        "checks": {
            "database": db_check,
            "rate_limit_store": "redis" if redis_ok else "memory",
        }
    }
    return JSONResponse(status_code=200 if is_ready else 503, content=body)
