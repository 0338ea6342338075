"""
Main FastAPI application with middleware, routing, and lifecycle management.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import time
import structlog

from medscan.core.config import settings
from medscan.core.logging import configure_logging
from medscan.db.database import init_db, close_db
from medscan.api.v1.router import api_router
from medscan.services.barcode import BarcodeSourceFactory, default_override_table

configure_logging(settings.log_level, settings.log_json)

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management."""
    # Startup
    logger.info("Starting MedScan Product Resolution API")

    init_db()
    logger.info("Database initialized")

    app.state.sources = BarcodeSourceFactory.create_sources(settings)
    app.state.overrides = default_override_table
    logger.info(
        "Product sources ready",
        sources=[source.provider_name for source in app.state.sources]
    )

    yield

    # Shutdown
    logger.info("Shutting down MedScan Product Resolution API")

    for source in app.state.sources:
        try:
            await source.close()
        except Exception as e:
            logger.error("Failed to close source", provider=source.provider_name, error=str(e))

    close_db()
    logger.info("Application shutdown complete")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="Resolves scanned product codes into canonical product records",
    version=settings.version,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
    lifespan=lifespan
)


# Request logging middleware
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all HTTP requests with timing."""
    start_time = time.time()

    try:
        response = await call_next(request)
    except Exception as e:
        logger.error(
            "Request failed",
            method=request.method,
            path=request.url.path,
            error=str(e),
            process_time=round(time.time() - start_time, 4),
        )
        raise

    process_time = time.time() - start_time
    logger.info(
        "Request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        process_time=round(process_time, 4),
    )
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unexpected exceptions."""
    logger.error(
        "Unhandled exception",
        method=request.method,
        path=request.url.path,
        error=str(exc),
        exc_info=True,
    )

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "message": "An unexpected error occurred. Please try again later.",
        }
    )


# Health check endpoint
@app.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "service": "medscan-api",
        "version": settings.version,
        "environment": settings.environment,
        "sources": settings.source_names,
    }


app.include_router(api_router, prefix="/api/v1")
