from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from findoc.core.config import settings
from findoc.services.extraction_store import ExtractionStore, get_extraction_store
from findoc.utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.get("/health")
def health_check(store: ExtractionStore = Depends(get_extraction_store)):
    """Health check endpoint."""
    logger.info("Checking system health...")

    health_status = {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "services": {},
    }

    # Check database
    try:
        logger.debug("Checking database connection...")
        health_status["stats"] = store.get_stats()
        health_status["services"]["database"] = "healthy"
    except Exception as e:
        logger.error(f"Failed to reach database: {e}")
        health_status["services"]["database"] = "unhealthy"
        health_status["status"] = "degraded"

    # Configuration
    config_errors = settings.validate_required_settings()
    health_status["services"]["config"] = "healthy" if not config_errors else config_errors
    if config_errors:
        health_status["status"] = "degraded"

    status_code = 200 if health_status["status"] == "healthy" else 503
    logger.info(f"Health check endpoint received: {status_code}")
    return JSONResponse(content=health_status, status_code=status_code)
