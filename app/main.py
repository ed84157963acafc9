"""
Main FastAPI application
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
import time
from prometheus_client import make_asgi_app, Counter, Histogram
import uuid

from app.config import settings
from app.core.database import init_db, close_db, async_session
from app.core.exceptions import RegistrationException
from app.core.redis import init_redis, close_redis
from app.core.logging import setup_logging
from app.core.seeding import seed_seats
from app.api.v1.api import api_router
from app.schemas.response import ErrorDetail, ErrorResponse

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)


def _request_metrics():
    """HTTP request counter and latency histogram, reused when already registered"""
    try:
        return (
            Counter("registration_requests_total", "HTTP requests", ["method", "endpoint", "status"]),
            Histogram("registration_request_duration_seconds", "HTTP request latency", ["method", "endpoint"]),
        )
    except ValueError:
        from prometheus_client import REGISTRY
        return (
            REGISTRY._names_to_collectors["registration_requests_total"],
            REGISTRY._names_to_collectors["registration_request_duration_seconds"],
        )


REQUEST_COUNT, REQUEST_DURATION = _request_metrics()


def error_response(status_code: int, code: str, message: str, details=None) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message, details=details or {}))
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager
    """
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")

    await init_db()
    logger.info("Database connection established")

    if settings.SEED_SEATS_ON_STARTUP:
        await seed_seats(async_session)

    # The rate limiter fails open, so a missing redis is not fatal
    if settings.RATE_LIMIT_ENABLED:
        try:
            await init_redis()
        except Exception as e:
            logger.warning(f"Redis unavailable, rate limiting disabled until it returns: {e}")

    yield

    # Shutdown
    logger.info("Shutting down application")

    await close_db()
    await close_redis()


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Conference registration and seat reservation API",
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    openapi_url="/openapi.json" if settings.DEBUG else None,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request tracking middleware
@app.middleware("http")
async def track_requests(request: Request, call_next):
    """
    Track request metrics and add request ID
    """
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    # Route template keeps ticket codes and ids out of the label set
    route = request.scope.get("route")
    endpoint = getattr(route, "path", request.url.path)

    REQUEST_COUNT.labels(
        method=request.method,
        endpoint=endpoint,
        status=response.status_code
    ).inc()

    REQUEST_DURATION.labels(
        method=request.method,
        endpoint=endpoint
    ).observe(duration)

    response.headers["X-Request-ID"] = request_id
    response.headers["X-Process-Time"] = str(duration)

    return response


# Exception handlers
@app.exception_handler(RegistrationException)
async def registration_exception_handler(request: Request, exc: RegistrationException):
    return error_response(exc.status_code, exc.code, exc.message, exc.details)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        {"errors": jsonable_encoder(exc.errors(), custom_encoder={Exception: str})},
    )


@app.exception_handler(404)
async def not_found_handler(request: Request, exc):
    return error_response(404, "NOT_FOUND", "The requested resource was not found")


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.error(f"Internal server error: {exc}", exc_info=True)
    return error_response(500, "INTERNAL_ERROR", "An internal server error occurred")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "name": settings.APP_NAME,
        "event": settings.EVENT_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.APP_ENV,
        "api_docs": "/docs" if settings.DEBUG else None
    }


app.include_router(api_router, prefix=settings.API_PREFIX)

# Mount Prometheus metrics endpoint
if settings.PROMETHEUS_ENABLED:
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
