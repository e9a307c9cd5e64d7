"""
OCR Extractor - Handles OCR processing for images and scanned PDF pages.

Single responsibility: Extract text from images using OCR.

One OCREngine is built by the orchestrator and handed to every extractor that
needs it; concurrent recognitions are capped by a semaphore.
"""
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pytesseract
from pdf2image import convert_from_path
from PIL import Image, ImageFilter, ImageOps

from findoc.core.config import settings
from findoc.core.exceptions import OCRPreprocessError
from findoc.utils.logger import get_logger

logger = get_logger(__name__)

PREPROCESS_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def preprocess_image(image_path: Path, max_dimension: Optional[int] = None) -> Path:
    """
    Normalize an image for recognition and write it to a temporary PNG.

    Steps: fit inside max_dimension x max_dimension (never enlarge), grayscale,
    contrast stretch, sharpen.

    Args:
        image_path: Source image
        max_dimension: Bounding box edge, defaults to settings.OCR_MAX_DIMENSION

    Returns:
        Path of the temporary processed image. The caller deletes it.

    Raises:
        OCRPreprocessError: Image could not be read or written
    """
    max_dimension = max_dimension or settings.OCR_MAX_DIMENSION

    try:
        with Image.open(image_path) as image:
            image.load()
            processed = image.copy()
    except PREPROCESS_ERRORS as e:
        raise OCRPreprocessError(f"Cannot read image {image_path.name}: {e}") from e

    handle = None
    try:
        # thumbnail() only ever shrinks
        processed.thumbnail((max_dimension, max_dimension), Image.LANCZOS)
        processed = ImageOps.grayscale(processed)
        processed = ImageOps.autocontrast(processed)
        processed = processed.filter(ImageFilter.SHARPEN)

        handle = tempfile.NamedTemporaryFile(
            prefix=f"{image_path.stem}_", suffix="_processed.png", delete=False
        )
        with handle:
            processed.save(handle, format="PNG")
    except PREPROCESS_ERRORS as e:
        if handle is not None:
            Path(handle.name).unlink(missing_ok=True)
        raise OCRPreprocessError(f"Cannot preprocess image {image_path.name}: {e}") from e

    logger.debug(f"Preprocessed {image_path.name} -> {handle.name} {processed.size}")
    return Path(handle.name)


class OCREngine:
    """Shared Tesseract handle with bounded concurrency."""

    def __init__(
            self,
            lang: Optional[str] = None,
            dpi: Optional[int] = None,
            max_workers: Optional[int] = None
    ):
        """
        Initialize OCR engine.

        Args:
            lang: OCR language (default: settings.OCR_LANGUAGE)
            dpi: Resolution for PDF to image conversion
            max_workers: Concurrent recognitions allowed
        """
        self.lang = lang or settings.OCR_LANGUAGE
        self.dpi = dpi or settings.PDF_OCR_DPI
        workers = settings.OCR_MAX_WORKERS if max_workers is None else max_workers
        if workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {workers}")
        self._slots = threading.BoundedSemaphore(workers)

        logger.info(f"OCR engine initialized: lang={self.lang}, dpi={self.dpi}")

    def recognize(self, image: Union[Path, Image.Image]) -> str:
        """
        Run OCR on an image file or an in-memory PIL image.

        Returns:
            Recognized text, stripped
        """
        with self._slots:
            text = pytesseract.image_to_string(
                str(image) if isinstance(image, Path) else image,
                lang=self.lang,
            )
        return (text or "").strip()

    def confidence(self, image: Image.Image) -> float:
        """Mean word confidence in [0, 1]."""
        with self._slots:
            data = pytesseract.image_to_data(
                image, lang=self.lang, output_type=pytesseract.Output.DICT
            )

        confidences = [float(c) for c in data.get("conf", []) if str(c) != "-1"]
        if not confidences:
            return 0.0
        return sum(confidences) / len(confidences) / 100.0

    def recognize_pdf_page(self, file_path: Path, page_number: int) -> Optional[Dict[str, Any]]:
        """
        Rasterize one PDF page and run OCR on it.

        Args:
            file_path: Path to PDF
            page_number: Page number (1-indexed)

        Returns:
            Dict with 'text' and 'confidence' keys, or None when the page
            could not be rasterized
        """
        images: List[Image.Image] = convert_from_path(
            str(file_path),
            first_page=page_number,
            last_page=page_number,
            dpi=self.dpi,
        )
        if not images:
            return None

        image = images[0]
        try:
            text = self.recognize(image)
            confidence = self.confidence(image)
        finally:
            image.close()

        logger.debug(
            f"OCR page {page_number}: confidence={confidence:.2f}, "
            f"text_length={len(text)}"
        )

        return {"page_number": page_number, "text": text, "confidence": confidence}

