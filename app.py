#!/usr/bin/env python3
"""
Main entry point for URL shortener service.

Concurrency: requests are served by one asyncio event loop (FastAPI +
uvicorn). The in-memory storage is guarded by read-write locks; the
PostgreSQL storage uses an asyncpg connection pool.

Usage:
    python app.py [-a host:port] [-b base_url] [-f storage_file] [-d database_dsn]

Environment variables (flags take precedence):
    SERVER_ADDRESS - host:port to listen on
    BASE_URL - Base URL for short links
    FILE_STORAGE_PATH - JSON snapshot file for in-memory storage
    DATABASE_DSN - PostgreSQL connection string (selects PostgreSQL storage)
    ENFORCE_OWNERSHIP_ON_REDIRECT - Redirect only to URLs owned by the session
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from shortener.common.logging_config import setup_logging
from shortener.storage import PostgresStorage, create_storage
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the storage on startup and release it on shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting URL shortener service...")

    storage = create_storage(config, logger=logger)
    if isinstance(storage, PostgresStorage):
        logger.info("Using PostgreSQL storage")
        await storage.ensure_tables()
    elif config.file_storage_path:
        logger.info(f"Using in-memory storage backed by {config.file_storage_path}")
    else:
        logger.info("Using in-memory storage without persistence")

    app.state.storage = storage
    logger.info("Service started successfully")

    yield

    logger.info("Shutting down URL shortener service...")
    await storage.close()
    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
    )

    logger.info("URL Shortener Service")
    logger.info(f"Configuration: {config.model_dump(exclude={'database_dsn'})}")

    app = create_app(storage=None, config=config)
    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        access_log=True,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.server_address}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
