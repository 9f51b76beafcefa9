"""Memoir storage API - FastAPI application."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from memoir import __version__
from memoir.config import Settings, get_settings
from memoir.log import configure_logging
from memoir.services.storage.provider import RemoteStoreProvider
from memoir.api.routes import diagnostics_router, storage_router


logger = structlog.get_logger(__name__)


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[RemoteStoreProvider] = None,
) -> FastAPI:
    """
    Build the API app.

    Args:
        settings: Settings to use (defaults to the cached environment settings)
        provider: Remote store provider; built from ``settings`` when omitted

    Returns:
        The FastAPI application, routes mounted under /api
    """
    settings = settings or get_settings()
    app_settings = settings.app
    configure_logging(
        json_logs=app_settings.log_json,
        level=logging.DEBUG if app_settings.debug_mode else logging.INFO,
    )

    if provider is None:
        provider = RemoteStoreProvider(settings.remote, settings.storage)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "api_starting",
            environment=app_settings.app_environment,
            storage_mode=provider.mode,
            remote_configured=provider.remote_settings.is_configured,
        )
        yield
        await provider.aclose()
        logger.info("api_stopped")

    app = FastAPI(
        title="Memoir Storage API",
        description="Key/value persistence for the Memoir journal",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.remote_provider = provider
    app.state.app_settings = app_settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(storage_router, prefix="/api")
    app.include_router(diagnostics_router, prefix="/api")

    @app.get("/")
    async def root():
        return {
            "service": "memoir-storage",
            "version": __version__,
            "status": "ok",
        }

    return app
