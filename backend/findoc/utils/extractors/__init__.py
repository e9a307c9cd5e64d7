"""
Extractors package - one extractor per input format.

Available extractors:
- PDFExtractor: PDF text (+ OCR for scanned pages)
- SpreadsheetExtractor: XLSX/XLS worksheets as grids
- CSVExtractor: CSV as a single grid
- WordExtractor: DOCX text
- ImageExtractor: OCR for images

Markup parsing for scraped pages lives in html_extractor.
"""
from findoc.utils.extractors.base import BaseExtractor
from findoc.utils.extractors.image_extractor import ImageExtractor
from findoc.utils.extractors.ocr_extractor import OCREngine, preprocess_image
from findoc.utils.extractors.pdf_extractor import PDFExtractor
from findoc.utils.extractors.table_extractor import CSVExtractor, SpreadsheetExtractor
from findoc.utils.extractors.word_extractor import WordExtractor

__all__ = [
    'BaseExtractor',
    'PDFExtractor',
    'SpreadsheetExtractor',
    'CSVExtractor',
    'WordExtractor',
    'ImageExtractor',
    'OCREngine',
    'preprocess_image',
]
