"""
API Dependencies - Shared dependencies for FastAPI routes.

Routes get their collaborators from here so tests can swap them with
app.dependency_overrides:
- settings
- the file processing service (owns the OCR engine)
- the web scraper (owns the HTTP client)
- the extraction store (database session)
"""
from fastapi import HTTPException, status

from findoc.core.config import settings, Settings
from findoc.services.extraction_store import get_extraction_store
from findoc.services.file_processing_service import (
    FileProcessingService, get_file_processing_service, is_supported_mime_type,
)
from findoc.services.web_scraping_service import WebScraper, get_web_scraper


# ==================== Configuration ====================

def get_settings() -> Settings:
    """Get application settings."""
    return settings


# ==================== Services ====================

def get_processor_dep() -> FileProcessingService:
    """Shared file processing service."""
    return get_file_processing_service()


def get_scraper_dep() -> WebScraper:
    """Shared web scraper."""
    return get_web_scraper()


get_store_dep = get_extraction_store


# ==================== Validation ====================

def validate_file_upload(
        content_type: str,
        content_length: int
) -> None:
    """
    Validate uploaded file.

    Args:
        content_type: MIME type of file
        content_length: Size in bytes

    Raises:
        HTTPException: 415 for unsupported types, 413 for oversized files
    """
    if not is_supported_mime_type(content_type):
        raise HTTPException(
            status_code=status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
            detail=f"Unsupported file type: {content_type}"
        )

    if content_length > settings.MAX_UPLOAD_SIZE:
        max_mb = settings.MAX_UPLOAD_SIZE / 1024 / 1024
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File too large. Maximum size: {max_mb:.0f}MB"
        )

    if content_length == 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Uploaded file is empty"
        )
