"""
File Processing Service - Main Orchestrator

Responsibilities:
1. Resolve the declared MIME type to a format extractor
2. Run the extractor and time the whole call
3. Convert grids and text into ExtractedRecord objects
4. Wrap any extractor failure in a single ExtractionError

Actual extraction logic lives in utils/extractors/, record building in
utils/converters.py. This service has no persistence side effects.
"""
import time
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional

from findoc.core.config import settings
from findoc.core.exceptions import ExtractionError, UnsupportedFormatError
from findoc.models.document import (
    ExtractedRecord, FileProvenance, ProcessedFileResult, ProcessingMetadata, RawExtraction,
)
from findoc.utils.converters import (
    extract_records_from_text, file_text_provenance, table_to_record,
)
from findoc.utils.extractors import (
    BaseExtractor, CSVExtractor, ImageExtractor, OCREngine, PDFExtractor,
    SpreadsheetExtractor, WordExtractor,
)
from findoc.utils.helper import elapsed_ms, generate_id
from findoc.utils.logger import get_logger

logger = get_logger(__name__)

PDF_MIME_TYPES = ["application/pdf"]
SPREADSHEET_MIME_TYPES = [
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-excel",
]
CSV_MIME_TYPES = ["text/csv"]
WORD_MIME_TYPES = [
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
]
IMAGE_MIME_TYPES = [
    "image/png", "image/jpeg", "image/jpg", "image/gif", "image/bmp", "image/tiff",
]


class FileProcessingService:
    """
    Turns one stored file into a ProcessedFileResult.

    The MIME -> extractor registry is built once here and never changes.
    The OCR engine is owned by this service and shared by the image and PDF
    extractors.
    """

    def __init__(self, ocr_engine: Optional[OCREngine] = None):
        """
        Initialize the file processing service.

        Args:
            ocr_engine: OCR handle; a default engine is built when omitted
        """
        self.ocr_engine = ocr_engine or OCREngine()
        self._registry = self._build_registry()

        logger.info(
            f"FileProcessingService initialized: {len(self._registry)} MIME types"
        )

    def _build_registry(self) -> Dict[str, BaseExtractor]:
        pdf = PDFExtractor(ocr_engine=self.ocr_engine)
        spreadsheet = SpreadsheetExtractor()
        csv = CSVExtractor()
        word = WordExtractor()
        image = ImageExtractor(engine=self.ocr_engine)

        registry: Dict[str, BaseExtractor] = {}
        for mime_types, extractor in (
                (PDF_MIME_TYPES, pdf),
                (SPREADSHEET_MIME_TYPES, spreadsheet),
                (CSV_MIME_TYPES, csv),
                (WORD_MIME_TYPES, word),
                (IMAGE_MIME_TYPES, image),
        ):
            for mime_type in mime_types:
                registry[mime_type] = extractor
        return registry

    @property
    def supported_mime_types(self) -> List[str]:
        return list(self._registry)

    def get_extractor(self, mime_type: str) -> BaseExtractor:
        """
        Raises:
            UnsupportedFormatError: No extractor registered for the type
        """
        extractor = self._registry.get((mime_type or "").lower())
        if extractor is None:
            raise UnsupportedFormatError(mime_type)
        return extractor

    def process_file(self, file_path: Path, name: str, mime_type: str) -> ProcessedFileResult:
        """
        Process a stored file.

        Args:
            file_path: Local path of the stored file
            name: Original (declared) file name
            mime_type: Declared MIME type

        Returns:
            ProcessedFileResult; empty extracted_data is a valid outcome

        Raises:
            UnsupportedFormatError: Unknown MIME type (before any work)
            ExtractionError: The extractor failed; no partial result
        """
        extractor = self.get_extractor(mime_type)
        file_path = Path(file_path)

        start = time.perf_counter()
        logger.info(f"Processing file: {name} ({mime_type}) with {extractor.name}")

        try:
            raw = extractor.extract(file_path)
            records = self._build_records(raw, name)
        except Exception as e:
            logger.error(
                f"File processing failed: {name} after "
                f"{elapsed_ms(start, time.perf_counter()):.1f}ms: {e}",
                exc_info=True,
            )
            raise ExtractionError(extractor.name, str(e) or type(e).__name__, cause=e) from e

        processing_time = elapsed_ms(start, time.perf_counter())

        result = ProcessedFileResult(
            id=generate_id("file"),
            name=name,
            type=mime_type,
            extracted_data=records,
            metadata=ProcessingMetadata(
                page_count=raw.page_count,
                table_count=len(records),
                text_length=raw.text_length,
                processing_time=processing_time,
                sheet_count=raw.extra.get("sheet_count"),
                row_count=raw.extra.get("row_count"),
            ),
            provenance=FileProvenance(
                file_path=name,
                extraction_method=extractor.extraction_method.value,
            ),
        )

        logger.info(f"File processed: {result.summary}")
        return result

    def _build_records(self, raw: RawExtraction, name: str) -> List[ExtractedRecord]:
        records: List[ExtractedRecord] = []

        for table in raw.tables:
            record = table_to_record(table, file_name=name)
            if record is not None:
                records.append(record)

        if raw.text:
            records.extend(extract_records_from_text(raw.text, file_text_provenance(name)))

        return records


# ==================== Convenience Functions ====================

@lru_cache()
def get_file_processing_service() -> FileProcessingService:
    """Process-wide service instance (FastAPI dependency)."""
    return FileProcessingService()


def process_file(file_path: Path, name: str, mime_type: str) -> ProcessedFileResult:
    """
    Convenience function for one-off processing.

    Args:
        file_path: Local path of the stored file
        name: Original file name
        mime_type: Declared MIME type

    Returns:
        ProcessedFileResult
    """
    return get_file_processing_service().process_file(file_path, name, mime_type)


def is_supported_mime_type(mime_type: str) -> bool:
    return (mime_type or "").lower() in settings.SUPPORTED_MIME_TYPES
