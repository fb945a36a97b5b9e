# Cher's Closet - Wardrobe Management Backend
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""Main FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from beartype import beartype
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.sessions import SessionMiddleware

from . import __version__
from .api.error_handling import register_error_handlers
from .api.v1 import router as api_router
from .core.config import Settings, get_settings, validate_database_environment
from .core.database import ConnectionPoolManager, PoolConfig
from .core.health import HealthVerifier
from .core.logging_utils import configure_logging, get_logger, resolve_level
from .core.security import Security
from .schemas.common import APIInfo
from .services.ai_service import AIStylist
from .services.storage import Storage
from .services.weather import WeatherClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle.

    Validates the database environment before anything else, so a
    misconfigured process never starts serving.
    """
    settings: Settings = app.state.settings
    logger.info(f"Starting {settings.app_name} ({settings.platform_label})")

    validate_database_environment(settings)

    pool_manager = ConnectionPoolManager(PoolConfig.from_settings(settings))
    await pool_manager.initialize()
    weather_client = WeatherClient(
        settings.openweather_api_key, settings.weather_api_url
    )

    app.state.pool_manager = pool_manager
    app.state.health_verifier = HealthVerifier(
        pool_manager,
        retries=settings.health_check_retries,
        delay_seconds=settings.health_check_retry_delay / 1000,
    )
    app.state.storage = Storage(pool_manager)
    app.state.security = Security(settings)
    app.state.weather_client = weather_client
    app.state.ai_stylist = AIStylist(settings.openai_api_key, settings.openai_model)

    if not weather_client.is_configured:
        logger.warning("OPENWEATHER_API_KEY not set; serving sample weather")
    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY not set; AI routes will answer 503")

    yield

    logger.info(f"Shutting down {settings.app_name}...")
    await weather_client.aclose()
    await pool_manager.close()


@beartype
def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    configure_logging(level=resolve_level(settings.log_level))

    app = FastAPI(
        title=settings.app_name,
        description="Wardrobe management, outfit planning and styling API",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie="cher_closet_session",
        max_age=settings.session_max_age,
        same_site="lax",
        https_only=settings.is_production,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    register_error_handlers(app)

    @app.get("/")
    async def root() -> APIInfo:
        """Root endpoint returning API information."""
        return APIInfo(
            name=settings.app_name,
            version=__version__,
            status="operational",
            environment=settings.app_env,
        )

    return app


@beartype
def main() -> None:
    """Run the main application entry point."""
    settings = get_settings()

    uvicorn.run(
        "cher_closet.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.is_development,
        log_level="info" if not settings.is_production else "error",
    )


if __name__ == "__main__":
    main()
