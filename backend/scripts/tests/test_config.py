"""Tests for settings."""
import pytest
from pydantic import ValidationError

from findoc.core.config import Settings, get_settings, settings


def test_directories_created():
    for directory in (settings.DATA_DIR, settings.UPLOAD_DIR):
        assert directory.is_dir()


def test_database_defaults_to_data_dir():
    assert settings.DATABASE_URL.startswith("sqlite:///")
    assert str(settings.DATA_DIR) in settings.DATABASE_URL


def test_get_settings_is_singleton():
    assert get_settings() is get_settings() is settings


def test_defaults():
    assert settings.MAX_UPLOAD_SIZE == 50 * 1024 * 1024
    assert settings.SCRAPING_TIMEOUT == 30.0
    assert settings.OCR_MAX_DIMENSION == 2000
    assert settings.OCR_MIN_CONFIDENCE == 0.6
    assert settings.DEFAULT_CURRENCY == "USD"
    assert len(settings.SUPPORTED_MIME_TYPES) == 12


def test_validate_required_settings():
    assert settings.validate_required_settings() == []

    broken = Settings(OCR_MAX_DIMENSION=50, SCRAPING_TIMEOUT=0, DEFAULT_CURRENCY="DOLLARS")
    errors = broken.validate_required_settings()
    assert len(errors) == 3


@pytest.mark.parametrize("workers", [0, -1])
def test_ocr_workers_must_be_positive(workers):
    with pytest.raises(ValidationError):
        Settings(OCR_MAX_WORKERS=workers)
