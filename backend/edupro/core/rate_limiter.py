"""
Rate Limiting for the Edu-Pro API
=================================
Implements rate limiting using slowapi, with Redis as the shared counter
store when REDIS_URL is set and in-process counters otherwise.

- Every route: RATE_LIMIT_PER_MINUTE req/min per client (moving window),
  applied by SlowAPIMiddleware
- Login and register: AUTH_RATE_LIMIT (5/min) brute force protection,
  applied by the AuthRateLimit dependency under the "strict" scope

The limiter is built by ``create_limiter`` and handed to ``create_app``;
routes reach it through ``request.app.state.limiter``.
"""

import math
import time
from typing import Optional

import limits
import redis.asyncio as redis
from fastapi import Request
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from edupro.core.config import Settings, settings
from edupro.core.exceptions import RateLimitedError, error_response
from edupro.core.logging_config import logger

STRICT_SCOPE = "strict"
DEFAULT_RETRY_AFTER = 60


def get_client_identifier(request: Request) -> str:
    """
    Get rate limit key for the caller.

    Priority:
    1. Authenticated actor ID (set by the auth dependency)
    2. Socket address of the client

    X-Forwarded-For is client-controlled and never part of the key; run
    uvicorn with --proxy-headers behind a trusted proxy instead.
    """
    actor = getattr(request.state, "actor", None)
    if actor is not None:
        return f"actor:{actor.id}"

    return f"ip:{get_remote_address(request)}"


def create_limiter(
    cfg: Optional[Settings] = None,
    *,
    enabled: Optional[bool] = None,
    storage_uri: Optional[str] = None
) -> Limiter:
    """Build the application's limiter from settings"""
    cfg = cfg or settings
    uri = storage_uri or cfg.REDIS_URL or "memory://"
    return Limiter(
        key_func=get_client_identifier,
        default_limits=[f"{cfg.RATE_LIMIT_PER_MINUTE}/minute"],
        storage_uri=uri,
        strategy="moving-window",
        enabled=(not cfg.DISABLE_RATE_LIMITING) if enabled is None else enabled,
        # Keep limiting in-process if Redis goes away mid-flight
        in_memory_fallback_enabled=not uri.startswith("memory://"),
        key_prefix="edupro",
    )


class AuthRateLimit:
    """
    Dependency applying the strict per-client limit to auth endpoints.

    Usage:
        @router.post("/login", dependencies=[Depends(auth_rate_limit)])
    """

    def __init__(self, limit: Optional[str] = None):
        self.item = limits.parse(limit or settings.AUTH_RATE_LIMIT)

    async def __call__(self, request: Request) -> None:
        limiter: Optional[Limiter] = getattr(request.app.state, "limiter", None)
        if limiter is None or not limiter.enabled:
            return

        key = get_client_identifier(request)
        if limiter.limiter.hit(self.item, STRICT_SCOPE, key):
            return

        stats = limiter.limiter.get_window_stats(self.item, STRICT_SCOPE, key)
        retry_after = max(1, math.ceil(stats.reset_time - time.time()))
        logger.warning(f"[RateLimit] Strict limit exceeded for {key} ({self.item})")
        raise RateLimitedError(retry_after, "Too many login attempts. Please try again later.")


auth_rate_limit = AuthRateLimit()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """
    Handler for the global limit tripped inside SlowAPIMiddleware.

    Kept synchronous: the middleware cannot await exception handlers.
    """
    item = getattr(exc.limit, "limit", None)
    retry_after = item.get_expiry() if item is not None else DEFAULT_RETRY_AFTER

    logger.warning(f"[RateLimit] Exceeded for {get_client_identifier(request)}: {exc.detail}")

    error = RateLimitedError(retry_after)
    return JSONResponse(
        status_code=error.status_code,
        content=error_response(error),
        headers=error.headers
    )


async def check_rate_limit_storage(url: Optional[str]) -> bool:
    """Ping the Redis counter store; False (and a warning) if unreachable"""
    if not url:
        logger.info("[RateLimit] No REDIS_URL set, using in-memory counters")
        return False

    client = redis.from_url(url, socket_connect_timeout=2)
    try:
        await client.ping()
        logger.info("[RateLimit] Redis counter store reachable")
        return True
    except (redis.RedisError, OSError) as e:
        logger.warning(f"[RateLimit] Redis unreachable, limits fall back to memory: {e}")
        return False
    finally:
        await client.aclose()
