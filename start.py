#!/usr/bin/env python3
"""
Startup script for the MedScan product resolution service.
Checks the database, then starts the server.
"""

import sys

import uvicorn
import structlog
from sqlalchemy import text

from medscan.core.config import get_settings
from medscan.core.logging import configure_logging
from medscan.db.database import engine

# Development and production presets
settings = get_settings()

logger = structlog.get_logger(__name__)


def check_database_connection() -> bool:
    """Check if database is accessible."""
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        logger.info("Database connection successful")
        return True
    except Exception as e:
        logger.error("Database connection failed", error=str(e))
        return False


def start_development_server():
    """Start the development server with hot reload."""
    logger.info("Starting MedScan in development mode...")

    uvicorn.run(
        "medscan.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        reload_dirs=["medscan"],
        log_level="info",
        access_log=True,
        loop="asyncio"
    )


def start_production_server():
    """Start the production server."""
    logger.info("Starting MedScan in production mode...")

    uvicorn.run(
        "medscan.main:app",
        host=settings.host,
        port=settings.port,
        workers=1,
        log_level="warning",
        access_log=False,
        loop="asyncio"
    )


def main():
    """Main startup function."""
    configure_logging(settings.log_level, settings.log_json)

    logger.info(
        "Starting MedScan Product Resolution API",
        environment=settings.environment,
        debug=settings.debug,
        sources=settings.source_names
    )

    if not check_database_connection():
        logger.error("Cannot start without database connection")
        sys.exit(1)

    if settings.environment == "development":
        start_development_server()
    else:
        start_production_server()


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
