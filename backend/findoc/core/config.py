"""
Core configuration for the financial document extraction service.

This module centralizes all application settings using Pydantic for type safety
and validation. Settings are loaded from environment variables.
"""
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # ==================== Pydantic Settings ====================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    # ==================== Database Configuration (SQLite) ====================
    DATABASE_URL: str = ""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Default DATABASE_URL lives inside DATA_DIR
        if not self.DATABASE_URL:
            self.DATABASE_URL = f"sqlite:///{self.DATA_DIR / 'findoc.db'}"
        self._create_directories()

    APP_NAME: str = "Financial Document Extractor"
    APP_VERSION: str = "1.0.0"
    API_V1_PREFIX: str = "/api/v1"

    # ==================== Development Defaults ====================
    DEBUG: bool = True
    HOST: str = "127.0.0.1"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # CORS - Development default
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]

    # ==================== File Storage ====================
    DATA_DIR: Path = Path("data")

    @property
    def UPLOAD_DIR(self) -> Path:
        return self.DATA_DIR / "uploads"

    # File upload constraints
    MAX_UPLOAD_SIZE: int = 52428800  # 50MB in bytes
    SUPPORTED_MIME_TYPES: list[str] = [
        "application/pdf",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
        "text/csv",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
        "image/png",
        "image/jpeg",
        "image/jpg",
        "image/gif",
        "image/bmp",
        "image/tiff",
    ]

    # ==================== Extraction ====================
    DEFAULT_CURRENCY: str = "USD"
    DEFAULT_UNITS: str = "millions"

    # PDF processing flags
    PDF_OCR_FALLBACK: bool = True
    PDF_OCR_DPI: int = 300

    # OCR
    OCR_LANGUAGE: str = "eng"
    OCR_MAX_DIMENSION: int = 2000
    OCR_MAX_WORKERS: int = Field(2, ge=1)
    OCR_MIN_CONFIDENCE: float = 0.6  # scanned PDF pages below this are dropped

    # ==================== Web Scraping ====================
    SCRAPING_TIMEOUT: float = 30.0  # seconds
    SCRAPING_USER_AGENT: str = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
    )

    # ==================== Telemetry ====================
    OTEL_ENABLED: bool = False
    OTEL_EXPORTER_OTLP_ENDPOINT: str = "http://localhost:4318"

    # ==================== Logging ====================
    LOG_FORMAT: str = "%(asctime)s - %(name)s - [%(levelname)s] - %(message)s"

    def _create_directories(self) -> None:
        """Create necessary directories on initialization."""
        directories = [
            self.DATA_DIR,
            self.UPLOAD_DIR,
        ]

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def validate_required_settings(self) -> list[str]:
        """
        Validate settings that would make extraction misbehave at runtime.

        Returns:
            List of validation errors (empty if all valid)
        """
        errors = []

        if self.OCR_MAX_DIMENSION < 100:
            errors.append("OCR_MAX_DIMENSION must be at least 100 pixels")

        if self.SCRAPING_TIMEOUT <= 0:
            errors.append("SCRAPING_TIMEOUT must be positive")

        if len(self.DEFAULT_CURRENCY) != 3:
            errors.append("DEFAULT_CURRENCY must be a 3-letter code")

        return errors


# ==================== Global Settings Instance ====================
settings = Settings()


# ==================== Helper Functions ====================
@lru_cache()
def get_settings() -> Settings:
    """
    Dependency function for FastAPI routes.

    Usage:
        @app.get("/config")
        def get_config(settings: Settings = Depends(get_settings)):
            return {"timeout": settings.SCRAPING_TIMEOUT}
    """
    return settings
