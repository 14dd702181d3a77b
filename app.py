#!/usr/bin/env python3
"""
Main entry point for the GeoIP redirect service.

Concurrency: country detection and URL screening are pure, synchronous
computations, so one evaluation per request is safe under any number of
concurrent connections. Set WORKERS > 1 for multi-process scaling.

Usage:
    python app.py

Environment variables:
    ENVIRONMENT (or NODE_ENV) - development, production, ...
    ENABLE_LOGGING - Set to true to log in production
    REDIRECT_CONFIG_SOURCE - Path or URL of the redirect config JSON
    PORT - Port to listen on
    WORKERS - Number of uvicorn worker processes (default 1)
    LOG_LEVEL - Logging level
"""

import signal
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from config import load_config
from geo_redirect.redirect_config import load_redirect_config
from geo_redirect.service import GeoRedirectService
from geo_redirect.common.logging_config import setup_logging
from web_app import create_app


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown."""
    config = app.state.config
    logger = app.state.logger

    logger.info("Starting GeoIP redirect service...")

    # Load redirect config (falls back to defaults on any failure)
    redirect_config = await load_redirect_config(
        config.redirect_config_source,
        timeout=config.redirect_config_timeout,
        logger=logger,
    )

    app.state.service = GeoRedirectService(
        redirect_config=redirect_config,
        flags=config.runtime_flags(),
        logger=logger,
    )

    logger.info("Service started successfully")

    yield

    logger.info("Service stopped")


def main():
    """Main entry point."""
    config = load_config()

    logger = setup_logging(
        level=config.log_level,
        log_file=config.log_file,
        json_format=config.log_json,
        enabled=config.logging_enabled,
    )

    logger.info("GeoIP Redirect Service")
    logger.info(f"Configuration: {config.model_dump()}")

    app = create_app(
        service_instance=None,  # Will be set in lifespan
        config=config,
    )

    app.state.logger = logger
    app.router.lifespan_context = lifespan

    uvicorn_config = uvicorn.Config(
        app,
        host=config.host,
        port=config.port,
        workers=config.workers,
        log_level=config.log_level.lower(),
        access_log=config.logging_enabled,
    )

    server = uvicorn.Server(uvicorn_config)

    def handle_signal(signum, frame):
        logger.info(f"Received signal {signum}, initiating graceful shutdown...")
        server.should_exit = True

    signal.signal(signal.SIGINT, handle_signal)
    signal.signal(signal.SIGTERM, handle_signal)

    try:
        logger.info(f"Starting server on {config.host}:{config.port}")
        server.run()
    except Exception as e:
        logger.error(f"Server error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
