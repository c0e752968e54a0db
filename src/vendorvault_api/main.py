"""FastAPI application entry point."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from vendorvault_api.config import get_settings
from vendorvault_api.database import create_tables
from vendorvault_api.exceptions import VendorVaultError
from vendorvault_api.middleware.error_handler import (
    generic_exception_handler,
    http_exception_handler,
    rate_limit_exceeded_handler,
    sqlalchemy_exception_handler,
    validation_exception_handler,
    vendorvault_exception_handler,
)
from vendorvault_api.routers import (
    auth,
    inspector,
    notifications,
    railway_admin,
    station_manager,
    stations,
    uploads,
    vendor,
    verify,
)
from vendorvault_api.security.rate_limit import limiter
from vendorvault_api.services.storage_service import StorageService
from vendorvault_api.tasks.scheduler import start_scheduler, stop_scheduler

logger = logging.getLogger(__name__)

ROUTERS = (
    (auth, "auth", "Authentication"),
    (stations, "stations", "Stations"),
    (vendor, "vendor", "Vendor"),
    (station_manager, "station-manager", "Station Manager"),
    (inspector, "inspector", "Inspector"),
    (railway_admin, "railway-admin", "Railway Admin"),
    (notifications, "notifications", "Notifications"),
    (verify, "verify", "Verify"),
    (uploads, "upload", "Uploads"),
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Middleware to add security headers to all responses."""

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        # Uploaded files may set their own caching
        if "Cache-Control" not in response.headers:
            response.headers["Cache-Control"] = "no-store, max-age=0"
        response.headers.setdefault("Vary", "Accept, Authorization, Origin")
        if get_settings().environment == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    settings = get_settings()
    # Startup
    if settings.auto_create_tables:
        await create_tables()
        logger.info("Database tables created")

    if settings.scheduler_enabled:
        await start_scheduler()
    yield
    # Shutdown
    await stop_scheduler()
    await StorageService.close_client()


def _allowed_origins() -> list[str]:
    """Validate configured CORS origins.

    Raises:
        ValueError: If a wildcard origin is configured
    """
    allowed_origins = []
    for origin in get_settings().cors_origins_list:
        # Credentials are allowed, so wildcards are rejected
        if origin == "*":
            raise ValueError(
                "CORS_ORIGINS cannot contain '*' wildcard when allow_credentials=True. "
                "Specify explicit origins."
            )
        if origin.startswith("http://") or origin.startswith("https://"):
            allowed_origins.append(origin)
    return allowed_origins


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    config = get_settings()

    app = FastAPI(
        title=config.app_name,
        version="0.1.0",
        description="Railway station vendor licensing API",
        lifespan=lifespan,
        docs_url="/docs" if config.debug else None,
        redoc_url="/redoc" if config.debug else None,
    )

    # Rate limiting
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    app.add_exception_handler(VendorVaultError, vendorvault_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, sqlalchemy_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # FastAPI runs middleware in reverse order of addition, so CORS runs first
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_allowed_origins(),
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-Requested-With"],
    )

    for module, prefix, tag in ROUTERS:
        app.include_router(module.router, prefix=f"/api/v1/{prefix}", tags=[tag])

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    return app


app = create_app()
