"""
Extraction error taxonomy.

- UnsupportedFormatError: declared type has no registered extractor (not retried)
- ExtractionError: a named extractor failed internally (wraps the cause)
- NetworkError: page fetch failed or timed out (caller may retry)
- OCRPreprocessError: image pre-processing failed (non-fatal, never surfaced)
"""
from typing import Optional


class FinDocError(Exception):
    """Base class for all extraction service errors."""


class UnsupportedFormatError(FinDocError):
    """Declared MIME type is not in the registered extractor set."""

    def __init__(self, mime_type: str):
        self.mime_type = mime_type
        super().__init__(f"Unsupported file type: {mime_type}")


class ProcessingError(FinDocError):
    """Processing of a document failed as a whole."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        self.cause = cause
        super().__init__(message)


class ExtractionError(ProcessingError):
    """A format extractor failed. Carries the extractor name and the cause."""

    def __init__(self, extractor: str, message: str, cause: Optional[BaseException] = None):
        self.extractor = extractor
        super().__init__(f"{extractor}: {message}", cause=cause)


class NetworkError(FinDocError):
    """Fetching a web page failed or timed out."""

    def __init__(self, url: str, message: str):
        self.url = url
        super().__init__(f"Failed to fetch {url}: {message}")


class OCRPreprocessError(FinDocError):
    """Image pre-processing failed; recognition falls back to the original bitmap."""
