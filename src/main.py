"""
Main application entry point.

Creates the FastAPI application, opens the database pool at startup and
installs the middleware stack:

    MetricsMiddleware -> AuthenticationMiddleware -> routes
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from config.settings import settings
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.infrastructure.observability.metrics_middleware import MetricsMiddleware
from src.infrastructure.observability.redis_metrics_storage import (
    empty_metrics,
    get_metrics_storage,
)
from src.infrastructure.security.authentication_middleware import AuthenticationMiddleware
from src.presentation.dependencies import get_database_connection, get_request_authenticator
from src.presentation.routes import auth_router, health_router, users_router

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Startup opens the connection pool, creates the schema and seeds the
    role catalog; shutdown closes the pool.
    """
    logger.info("Starting Book Network auth API...")

    db = get_database_connection()
    await db.connect()
    await db.init_schema(seed_roles=settings.seed_roles)

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down Book Network auth API...")
    await db.disconnect()
    if settings.enable_metrics:
        await get_metrics_storage().close()
    logger.info("Application shutdown complete")


app = FastAPI(
    title="Book Network Auth API",
    description="""
    Account registration, email activation and JWT authentication.

    - Register with name, email and password; a 6-digit code is emailed
    - Activate with the code within 10 minutes (expired codes are re-sent)
    - Authenticate to receive a bearer token for protected endpoints
    """,
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(AuthenticationMiddleware, authenticator_factory=get_request_authenticator)

if settings.enable_metrics:
    app.add_middleware(MetricsMiddleware)
    logger.info("Metrics middleware enabled")
else:
    logger.info("Metrics middleware disabled")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """
    Return 400 with field-level messages instead of FastAPI's default 422.

    Decision: Every malformed body or query, including a missing activation
    token, answers 400 so clients handle a single validation status.
    """
    errors = exc.errors()
    error_messages = [f"{err['loc'][-1]}: {err['msg']}" for err in errors]

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "detail": {
                "error": "ValidationError",
                "message": "Request validation failed",
                "errors": error_messages,
            }
        },
    )


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(health_router)


@app.get("/", tags=["root"])
async def root() -> dict[str, str]:
    return {
        "service": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "health": "/health",
    }


@app.get("/metrics", tags=["monitoring"])
async def get_metrics_endpoint() -> dict:
    """Metrics aggregated across all workers, when metrics are enabled."""
    if not settings.enable_metrics:
        return {
            "error": "MetricsDisabled",
            "message": "Metrics collection is disabled. Enable with ENABLE_METRICS=true",
            **empty_metrics(),
        }
    return await get_metrics_storage().get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
