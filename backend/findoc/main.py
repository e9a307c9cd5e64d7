"""
Main FastAPI Application.

This is the entry point for the backend server.
It configures and runs the complete API.
"""
from contextlib import asynccontextmanager

import dotenv
from fastapi import FastAPI

from findoc.api.middleware.cors import setup_cors
from findoc.api.middleware.error_handler import ErrorMiddleware, register_exception_handlers
from findoc.api.routes import api_router, health
from findoc.core.config import settings
from findoc.core.database import create_db_and_tables
from findoc.utils import get_logger

dotenv.load_dotenv()

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    # Startup
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {'Development' if settings.DEBUG else 'Production'}")

    if settings.OTEL_ENABLED:
        from findoc.telemetry.setup import setup_telemetry
        setup_telemetry()
        logger.info(f"Telemetry exporting to {settings.OTEL_EXPORTER_OTLP_ENDPOINT}")

    # Initialize database
    create_db_and_tables()

    # Validate configuration
    for error in settings.validate_required_settings():
        logger.warning(f"Configuration problem: {error}")

    logger.info(f"Server ready at http://{settings.HOST}:{settings.PORT}")

    yield  # Server runs here

    # Shutdown
    logger.info("Shutting down gracefully...")


# Create FastAPI app
app = FastAPI(
    lifespan=lifespan,
    title=settings.APP_NAME,
    description="Financial statement extraction from documents, web pages and data connectors",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
)

# Error handling
register_exception_handlers(app)
app.add_middleware(ErrorMiddleware)

# CORS middleware
setup_cors(app)

# Routes
app.include_router(health.router, tags=["health"])
api_router.include_router(health.router, tags=["health"], prefix="")
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


@app.get("/")
def root():
    """Root endpoint - API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "running",
        "docs": "/docs",
        "openapi": "/openapi.json"
    }


if __name__ == "__main__":
    import uvicorn
    try:
        uvicorn.run(
            "findoc.main:app",
            host=settings.HOST,
            port=settings.PORT,
            reload=settings.DEBUG,  # Auto-reload in dev mode
            log_level=settings.LOG_LEVEL.lower()
        )
    except KeyboardInterrupt:
        logger.warning("Shutdown requested")
        logger.info("Goodbye")
