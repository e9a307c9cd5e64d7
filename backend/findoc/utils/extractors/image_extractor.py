"""
Image Extractor - OCR for uploaded images (JPEG/PNG/GIF/BMP/TIFF).

The processed copy produced by preprocess_image is always deleted, whether
recognition succeeds or not.
"""
from pathlib import Path
from typing import Optional

from findoc.core.exceptions import OCRPreprocessError
from findoc.models.document import DocumentFormat, ExtractionMethod, RawExtraction
from findoc.utils.extractors.base import BaseExtractor
from findoc.utils.extractors.ocr_extractor import OCREngine, preprocess_image
from findoc.utils.logger import get_logger

logger = get_logger(__name__)


class ImageExtractor(BaseExtractor):
    """Preprocesses an image and hands it to the shared OCR engine."""

    format = DocumentFormat.IMAGE
    extraction_method = ExtractionMethod.OCR_EXTRACTION

    def __init__(self, engine: OCREngine):
        self.engine = engine

    def extract(self, file_path: Path) -> RawExtraction:
        logger.info(f"Running OCR: {file_path.name}")

        processed_path: Optional[Path] = None
        try:
            try:
                processed_path = preprocess_image(file_path)
                target = processed_path
            except OCRPreprocessError as e:
                logger.warning(f"Preprocessing failed, OCR on original: {e}")
                target = file_path

            text = self.engine.recognize(target)

        finally:
            if processed_path is not None:
                processed_path.unlink(missing_ok=True)

        logger.info(f"OCR {file_path.name}: {len(text)} chars")

        return RawExtraction(text=text)
