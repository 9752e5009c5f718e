"""FastAPI application factory."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ngo_admin.api.router import api_router
from ngo_admin.config import settings
from ngo_admin.core.cache import close_redis_pool
from ngo_admin.core.errors import register_exception_handlers
from ngo_admin.core.logging import RequestLoggingMiddleware, configure_logging
from ngo_admin.core.permissions import PermissionService, build_permission_service


configure_logging(settings)

logger = structlog.get_logger()


def _lifespan(service: PermissionService):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Load permission overrides on startup; release pools on shutdown."""
        logger.info(
            "application_startup",
            app_name=settings.app_name,
            environment=settings.environment,
            settings_backend=settings.settings_backend,
        )

        app.state.permissions = service
        result = await service.load()
        if not result.ok:
            logger.warning("serving_default_permissions", error=result.error)

        yield

        logger.info("application_shutdown")
        if service.has_unsaved_changes:
            logger.warning("unsaved_permission_overrides_discarded")

        if settings.settings_backend == "redis":
            await close_redis_pool()
            logger.info("redis_pool_closed")

    return lifespan


def create_app(service: PermissionService | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        service: PermissionService to use; built from settings when omitted

    Returns:
        Configured FastAPI application instance.
    """
    service = service or build_permission_service(settings)

    app = FastAPI(
        title=settings.app_name,
        description="Role-based permission engine for the charity admin panel",
        version="0.1.0",
        debug=settings.debug,
        lifespan=_lifespan(service),
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
    )
    # Available before startup too, so checks fall back to defaults
    app.state.permissions = service

    cors_origins = settings.cors_origins
    if settings.is_development and not cors_origins:
        cors_origins = ["http://localhost:3000", "http://localhost:5173"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID", "X-User-Id"],
    )
    app.add_middleware(RequestLoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(api_router)

    return app
