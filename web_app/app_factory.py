"""FastAPI application factory."""

from fastapi import FastAPI

from .api import api_router
from .web import web_router
from .middleware.logging import LoggingMiddleware
from .middleware.session import SessionMiddleware


def create_app(storage, config) -> FastAPI:
    """Create and configure FastAPI application.

    Args:
        storage: Storage instance (``StorageBase``); may be None when it is
            built later by the lifespan handler
        config: Configuration instance

    Returns:
        Configured FastAPI app
    """
    app = FastAPI(
        title="URL Shortener",
        description="URL shortening service with per-session archives",
        version="1.0.0",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Routes reach the storage through app state, never a module global
    app.state.storage = storage
    app.state.config = config

    # Added last runs first: logging wraps the session middleware
    app.add_middleware(SessionMiddleware)
    app.add_middleware(LoggingMiddleware)

    app.include_router(api_router, prefix="/api", tags=["API"])
    app.include_router(web_router, tags=["Web"])

    return app
