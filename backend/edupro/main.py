from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from typing import Optional
import asyncio

from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from edupro.core.config import settings
from edupro.core.database import init_db, close_db
from edupro.core.exceptions import EduProError, InternalError, error_response
from edupro.core.logging_config import logger
from edupro.core.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
    RequestSizeLimitMiddleware,
)
from edupro.core.rate_limiter import (
    create_limiter,
    rate_limit_exceeded_handler,
    check_rate_limit_storage,
)
from edupro.api.v1.router import api_router
from edupro.api.v1.endpoints import health


async def validate_critical_config():
    """Validate critical configuration at startup - fail fast if missing"""
    errors = []

    if not settings.DATABASE_URL:
        errors.append("DATABASE_URL is not set")

    if not settings.JWT_SECRET_KEY or settings.JWT_SECRET_KEY == "CHANGE_ME":
        errors.append("JWT_SECRET_KEY is not set or using default value")

    if errors:
        for err in errors:
            logger.critical(f"[Startup] CRITICAL: {err}")
        raise RuntimeError(f"Missing critical configuration: {', '.join(errors)}")

    if settings.DISABLE_RATE_LIMITING:
        logger.warning("[Startup] WARNING: rate limiting is disabled")

    logger.info("[Startup] Critical configuration validated")
    return True


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan event handler for startup and shutdown"""
    logger.info(f"Starting {settings.APP_NAME}...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")
    logger.info(f"API Version: {settings.API_VERSION}")

    await validate_critical_config()

    await init_db()
    logger.info("[Startup] Database tables ready")

    if app.state.limiter.enabled:
        await check_rate_limit_storage(settings.REDIS_URL)

    yield

    logger.info(f"Shutting down {settings.APP_NAME}...")
    await close_db()


async def edupro_error_handler(request: Request, exc: EduProError):
    expose = exc.status_code < 500 or settings.DEBUG
    if exc.status_code >= 500:
        logger.log_error_with_context(exc, context=f"{request.method} {request.url.path}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(exc, expose_message=expose),
        headers=exc.headers
    )


async def validation_error_handler(request: Request, exc: RequestValidationError):
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "Invalid value"),
        }
        for err in exc.errors()
    ]
    message = fields[0]["message"] if len(fields) == 1 else "Validation failed"
    error = EduProError(message, code="INVALID_INPUT", details={"errors": fields})
    return JSONResponse(status_code=400, content=error_response(error))


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    error = InternalError(str(exc) if settings.DEBUG else "Internal server error")
    return JSONResponse(status_code=500, content=error_response(error))


def create_app(limiter: Optional[Limiter] = None) -> FastAPI:
    """
    Build the application.

    ``limiter`` defaults to one built from settings; tests pass their own.
    """
    app = FastAPI(
        title=settings.APP_NAME,
        description="School management API: admins, students, teachers and coaches",
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
        redirect_slashes=False
    )

    # Shared per-process state
    app.state.limiter = limiter or create_limiter(settings)
    app.state.school_registration_lock = asyncio.Lock()

    app.add_exception_handler(EduProError, edupro_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, global_exception_handler)

    # Middleware (order matters - last added runs first)
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestSizeLimitMiddleware, max_size=settings.MAX_REQUEST_SIZE)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Response-Time"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    @app.get("/", tags=["Root"])
    async def root():
        return {
            "message": f"Welcome to {settings.APP_NAME}",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health/live"
        }

    app.include_router(health.router)
    app.include_router(api_router, prefix=settings.api_prefix)

    return app


app = create_app()
