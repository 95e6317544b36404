"""RentInspect - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rentinspect.core.config import get_settings
from rentinspect.core.database import dispose_engine
from rentinspect.core.env_validation import validate_environment
from rentinspect.core.exceptions import InspectionCoreError
from rentinspect.core.logging import setup_logging
from rentinspect.routers import auth_router, inspections_router, properties_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup: hard-fails (exit 1) if required configuration is missing
    settings = validate_environment()
    setup_logging(settings.log_level)
    logger.info(f"[STARTUP] {settings.app_name} using {settings.storage_provider.value} storage")
    yield
    # Shutdown
    await dispose_engine()


async def core_error_handler(request: Request, exc: InspectionCoreError) -> JSONResponse:
    """Render core outcomes using their status hint."""
    if exc.status_code >= 500:
        logger.warning(f"[API] {request.method} {request.url.path} -> {exc.code}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "error": exc.code},
    )


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.app_name,
        description="Property inspections with per-room photo evidence and deterministic PDF reports.",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    # In production, wildcard (*) is blocked by env_validation.py
    allowed_origins = [origin.strip() for origin in settings.allowed_origins.split(",")]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(InspectionCoreError, core_error_handler)

    # API v1 routers
    app.include_router(auth_router, prefix=settings.api_v1_prefix)
    app.include_router(properties_router, prefix=settings.api_v1_prefix)
    app.include_router(inspections_router, prefix=settings.api_v1_prefix)

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": settings.app_name}

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "service": settings.app_name,
            "version": "1.0.0",
            "docs": "/docs" if settings.debug else "Disabled in production",
        }

    return app


app = create_app()
