"""
Funnel.vc FastAPI Application
Main entry point for the founder-to-VC matching API.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from funnel.api import health, matches, pitch, profile, vc
from funnel.core.config import settings
from funnel.core.exceptions import format_validation_errors
from funnel.core.log_config import configure_logging
from funnel.core.sentry import capture_exception, init_sentry
from funnel.database import close_db, init_db

# =============================================================================
# Logging Configuration
# =============================================================================

configure_logging()
logger = logging.getLogger(__name__)


# =============================================================================
# Lifespan Events
# =============================================================================

INSECURE_SECRET_KEYS = (
    "CHANGE-THIS-IN-PRODUCTION-REQUIRED",
    "dev-secret-key-change-in-production",
    "secret",
    "changeme",
)


def validate_security_settings() -> None:
    """
    Validate critical security settings at startup.
    Raises RuntimeError if insecure configuration detected in production.
    """
    is_production = settings.environment.lower() in ("production", "prod")
    warnings = []
    errors = []

    if settings.secret_key in INSECURE_SECRET_KEYS or len(settings.secret_key) < 32:
        msg = "SECRET_KEY is insecure or too short (minimum 32 characters required)"
        if is_production:
            errors.append(msg)
        else:
            warnings.append(msg)

    if is_production and settings.debug:
        errors.append("DEBUG mode must be disabled in production (set DEBUG=false)")

    if not settings.anthropic_api_key:
        warnings.append("ANTHROPIC_API_KEY is not set - matches will use fallback scores")

    for warning in warnings:
        logger.warning(f"SECURITY WARNING: {warning}")

    if errors:
        for error in errors:
            logger.error(f"SECURITY ERROR: {error}")
        raise RuntimeError(f"Cannot start in production with insecure configuration: {'; '.join(errors)}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Handle application startup and shutdown events.

    Startup:
    - Validate security settings
    - Initialize Sentry
    - Create tables if needed (dev only)

    Shutdown:
    - Close database connections
    """
    logger.info("Starting Funnel.vc API...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.debug}")
    logger.info(f"Version: {settings.app_version}")

    validate_security_settings()

    if init_sentry():
        logger.info("Sentry error tracking enabled")
    else:
        logger.info("Sentry error tracking disabled (no DSN configured)")

    # In production, use migrations instead
    if settings.debug:
        try:
            await init_db()
            logger.info("Database initialized successfully")
        except Exception as e:
            logger.error(f"Database initialization failed: {e}")

    logger.info("Application startup complete")

    yield

    logger.info("Shutting down Funnel.vc API...")
    await close_db()
    logger.info("Database connections closed")


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="Funnel.vc API",
    description="""
    Founder-to-VC Matching API

    Funnel.vc connects startup founders with venture capital investors.

    ## Features

    - **Founder Profiles**: Submit a pitch deck for extraction and analysis
    - **Matching**: VCs filtered by check size and sector, ranked by thesis fit
    - **Pitching**: One-shot fit check against a chosen VC, synced to the VC's CRM on a match
    - **VC Profiles**: Publish a thesis with a public page

    ## Authentication

    Bearer tokens are issued by the identity service.
    """,
    version=settings.app_version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    openapi_url="/openapi.json" if settings.debug else None,
    lifespan=lifespan,
)

# =============================================================================
# CORS Middleware
# =============================================================================

allowed_origins = [settings.frontend_url]
if settings.debug:
    allowed_origins.extend(
        [
            "http://localhost:3000",
            "http://127.0.0.1:3000",
        ]
    )

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# Exception Handlers
# =============================================================================


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions with consistent format."""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": True,
            "message": exc.detail,
            "status_code": exc.status_code,
        },
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report request validation failures as 400 with itemized field errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": True,
            "message": format_validation_errors(exc.errors()),
            "status_code": status.HTTP_400_BAD_REQUEST,
        },
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception(f"Unexpected error: {exc}")

    event_id = capture_exception(
        exc,
        extra={
            "request_url": str(request.url),
            "request_method": request.method,
            "request_path": request.url.path,
        },
    )

    # Don't expose internal errors in production
    if settings.debug:
        detail = str(exc)
    else:
        detail = f"Internal server error (ref: {event_id})" if event_id else "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": True,
            "message": detail,
            "status_code": 500,
            "error_id": event_id,
        },
    )


# =============================================================================
# API Routers
# =============================================================================

app.include_router(health.router)
app.include_router(matches.router)
app.include_router(profile.router)
app.include_router(pitch.router)
app.include_router(vc.router)


@app.get("/", tags=["Root"])
async def root() -> dict:
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Founder-to-VC Matching API",
        "docs_url": "/docs" if settings.debug else None,
        "health_url": "/health",
        "readiness_url": "/health/ready",
    }


# For running with uvicorn directly
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "funnel.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
