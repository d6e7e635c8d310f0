# ==============================================================================
# MAIN APPLICATION - FastAPI Entry Point
# ==============================================================================
# Application factory with lifespan events, middleware, and routing
# ==============================================================================

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from dualstore.api import normalizer
from dualstore.api.router import build_api_router
from dualstore.core.constants import SuccessMessages
from dualstore.core.exceptions import AppException, StoreError
from dualstore.core.settings import Settings, get_settings
from dualstore.database.registry import AdapterRegistry
from dualstore.middleware.request_logger import RequestLoggerMiddleware
from dualstore.schemas.base import HealthResponse
from dualstore.utils.helpers import utc_now

# Configure logging
logging.basicConfig(
    level=get_settings().LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

_STARTED_AT = time.monotonic()


# ==============================================================================
# LIFESPAN MANAGEMENT
# ==============================================================================

def build_lifespan(settings: Settings, registry: AdapterRegistry):
    """Lifespan bound to one settings object and one registry."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """
        Application lifespan manager.

        - Startup: connect both stores
        - Shutdown: close both stores
        """
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
        logger.info(f"Environment: {settings.ENVIRONMENT.value}")

        try:
            await registry.initialize()
            logger.info("Stores initialized successfully")
        except Exception as e:
            logger.error(f"Failed to initialize stores: {e}")
            # Keep serving in development so /health can report the outage
            if settings.is_production:
                raise

        yield

        logger.info("Shutting down application...")
        await registry.shutdown()
        logger.info("Application shutdown complete")

    return lifespan


# ==============================================================================
# APPLICATION FACTORY
# ==============================================================================

def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[AdapterRegistry] = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration (defaults to the cached environment settings)
        registry: Adapter registry (defaults to one built from settings)

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()
    registry = registry or AdapterRegistry(settings)

    app = FastAPI(
        title=settings.APP_NAME,
        description="CRUD for one User entity over MongoDB and PostgreSQL.",
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        lifespan=build_lifespan(settings, registry),
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
        openapi_url="/openapi.json" if settings.DEBUG else None,
    )
    app.state.settings = settings
    app.state.registry = registry

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.REQUEST_LOGGING:
        app.add_middleware(RequestLoggerMiddleware)

    register_exception_handlers(app, settings)

    app.include_router(build_api_router(settings.API_PREFIX))

    register_health_endpoints(app, settings, registry)

    return app


# ==============================================================================
# EXCEPTION HANDLERS
# ==============================================================================

def register_exception_handlers(app: FastAPI, settings: Settings) -> None:
    """Route every failure through the response normalizer."""

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error(
                f"{request.method} {request.url.path}: {exc.message} ({exc.detail})"
            )
        return normalizer.error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND:
            return normalizer.route_not_found(request.method, request.url.path)
        return normalizer.http_error(exc.status_code, str(exc.detail))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        logger.debug(f"Rejected request body: {exc.errors()}")
        return normalizer.invalid_body()

    @app.exception_handler(Exception)
    async def generic_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        logger.exception(f"Unexpected error: {exc}")
        return normalizer.internal_error(exc, debug=settings.DEBUG)


# ==============================================================================
# HEALTH ENDPOINTS
# ==============================================================================

def register_health_endpoints(
    app: FastAPI,
    settings: Settings,
    registry: AdapterRegistry,
) -> None:
    """Register health check endpoints."""

    @app.get(
        "/health",
        response_model=HealthResponse,
        tags=["Health"],
        summary="Health check",
        description="Process uptime and connectivity of each store.",
    )
    async def health_check() -> HealthResponse:
        stores = await registry.health_check()
        return HealthResponse(
            message=SuccessMessages.SERVER_RUNNING,
            version=settings.APP_VERSION,
            timestamp=utc_now(),
            uptime=round(time.monotonic() - _STARTED_AT, 3),
            stores={
                backend: "connected" if healthy else "disconnected"
                for backend, healthy in stores.items()
            },
        )

    @app.get(
        "/",
        tags=["Health"],
        summary="Root endpoint",
        description="Welcome message and endpoint map.",
    )
    async def root() -> Dict[str, Any]:
        users = f"{settings.API_PREFIX}/users"
        return {
            "status": "success",
            "message": f"Welcome to {settings.APP_NAME}",
            "version": settings.APP_VERSION,
            "endpoints": {
                "health": "/health",
                "mongo": f"{users}/mongo",
                "postgres": f"{users}/postgres",
            },
        }


# Create application instance
app = create_app()


# ==============================================================================
# DEVELOPMENT RUNNER
# ==============================================================================

def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "dualstore.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
