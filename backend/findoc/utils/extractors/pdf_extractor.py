"""
PDF Extractor - Handles PDF document extraction.

Responsibilities:
1. Extract text from every page (PyMuPDF, pdfplumber as fallback)
2. Report the page count
3. OCR scanned pages that carry no text layer

Statement detection over the returned text happens in the orchestrator.
"""
from pathlib import Path
from typing import List, Optional

import fitz  # PyMuPDF
import pdfplumber

from findoc.core.config import settings
from findoc.models.document import DocumentFormat, ExtractionMethod, RawExtraction
from findoc.utils.extractors.base import BaseExtractor
from findoc.utils.extractors.ocr_extractor import OCREngine
from findoc.utils.logger import get_logger

logger = get_logger(__name__)


class PDFExtractor(BaseExtractor):
    """
    Handles PDF document extraction.

    Scanned pages are only OCR'd when an engine is supplied and
    PDF_OCR_FALLBACK is enabled. Recognized text below OCR_MIN_CONFIDENCE
    is dropped.
    """

    format = DocumentFormat.PDF
    extraction_method = ExtractionMethod.PDF_PARSING

    def __init__(
            self,
            ocr_engine: Optional[OCREngine] = None,
            enable_ocr: Optional[bool] = None,
            min_confidence: Optional[float] = None,
    ):
        """
        Initialize PDF extractor.

        Args:
            ocr_engine: Shared OCR engine for scanned pages
            enable_ocr: Override settings.PDF_OCR_FALLBACK
            min_confidence: Override settings.OCR_MIN_CONFIDENCE
        """
        self.ocr_engine = ocr_engine
        self.enable_ocr = settings.PDF_OCR_FALLBACK if enable_ocr is None else enable_ocr
        self.min_confidence = (
            settings.OCR_MIN_CONFIDENCE if min_confidence is None else min_confidence
        )

        logger.info(f"PDFExtractor initialized: ocr={self.enable_ocr and ocr_engine is not None}")

    def extract(self, file_path: Path) -> RawExtraction:
        """
        Extract text from PDF.

        Args:
            file_path: Path to PDF

        Returns:
            RawExtraction with the full text and page count
        """
        logger.info(f"Extracting PDF: {file_path.name}")

        try:
            pages = self._extract_pages_pymupdf(file_path)
        except (RuntimeError, ValueError) as e:
            # PyMuPDF raises RuntimeError/FileDataError on damaged files
            logger.warning(f"PyMuPDF failed, using pdfplumber: {e}")
            pages = self._extract_pages_pdfplumber(file_path)

        ocr_pages = 0
        for index, text in enumerate(pages):
            if text or not self._ocr_available:
                continue
            recognized = self._ocr_page(file_path, index + 1)
            if recognized:
                pages[index] = recognized
                ocr_pages += 1

        text = "\n\n".join(page for page in pages if page)

        logger.info(
            f"PDF extracted: {file_path.name} pages={len(pages)}, "
            f"chars={len(text)}, ocr_pages={ocr_pages}"
        )

        return RawExtraction(
            text=text,
            page_count=len(pages),
            extra={"ocr_pages": ocr_pages},
        )

    @property
    def _ocr_available(self) -> bool:
        return self.enable_ocr and self.ocr_engine is not None

    def _extract_pages_pymupdf(self, file_path: Path) -> List[str]:
        pages: List[str] = []
        with fitz.open(file_path) as doc:
            logger.debug(f"Extracting {doc.page_count} pages")
            for page in doc:
                pages.append((page.get_text("text") or "").strip())
        return pages

    def _extract_pages_pdfplumber(self, file_path: Path) -> List[str]:
        pages: List[str] = []
        with pdfplumber.open(file_path) as pdf:
            for page in pdf.pages:
                pages.append((page.extract_text() or "").strip())
        return pages

    def _ocr_page(self, file_path: Path, page_number: int) -> str:
        """OCR one page; failures leave the page empty."""
        logger.debug(f"Page {page_number} has no text layer, applying OCR")

        try:
            result = self.ocr_engine.recognize_pdf_page(file_path, page_number)
        except Exception as e:
            logger.warning(f"OCR failed for page {page_number}: {e}")
            return ""

        if not result:
            return ""

        confidence = result.get("confidence", 0.0)
        if confidence < self.min_confidence:
            logger.debug(f"OCR confidence too low on page {page_number}: {confidence:.2f}")
            return ""

        logger.debug(f"OCR page {page_number} accepted: confidence={confidence:.2f}")
        return result["text"]

