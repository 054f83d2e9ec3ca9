"""Application lifespan management for startup and shutdown events."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from biocatalog.system.structlog_configurator import configure_structlog
from biocatalog.web.core.container import Container

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Context manager for application startup and shutdown events.

    Configures logging, mounts static files, creates the database tables,
    and opens the pooled lookup client. Everything is released in reverse
    order on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control back to the application for normal operation.
    """
    # Get the container from the app (ignore type error - runtime dynamic attribute)
    container: Container = app.container  # type: ignore[attr-defined]

    config = container.config()
    configure_structlog(config)

    path_resolver = container.path_resolver()
    app.mount(
        "/static",
        StaticFiles(directory=path_resolver.get_static_dir()),
        name="static",
    )

    logger.info("Starting application services...")

    database_service = container.database_service()
    lookup_service = container.lookup_service()
    try:
        await database_service.initialize()
        await lookup_service.start()

        logger.info("All services started successfully")

        yield

    finally:
        logger.info("Shutting down application services...")

        try:
            await lookup_service.stop()
            await database_service.dispose()

            logger.info("All services stopped successfully")

        except Exception as e:
            logger.error(f"Error during service shutdown: {e}")
            raise
