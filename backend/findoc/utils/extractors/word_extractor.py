"""
Word Extractor - DOCX text extraction via python-docx.

Paragraph text first, then every table row with cells tab-separated so that
"Revenue<TAB>1,000" still reads as a labelled figure.
"""
from pathlib import Path
from typing import List

import docx

from findoc.models.document import DocumentFormat, ExtractionMethod, RawExtraction
from findoc.utils.extractors.base import BaseExtractor
from findoc.utils.logger import get_logger

logger = get_logger(__name__)


class WordExtractor(BaseExtractor):
    """Reads paragraphs and table rows of a Word document."""

    format = DocumentFormat.WORD
    extraction_method = ExtractionMethod.WORD_PARSING

    def extract(self, file_path: Path) -> RawExtraction:
        logger.info(f"Extracting Word document: {file_path.name}")

        # Legacy binary .doc is not readable by python-docx; the error propagates
        document = docx.Document(str(file_path))

        lines: List[str] = [p.text for p in document.paragraphs if p.text.strip()]

        for table in document.tables:
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells]
                if any(cells):
                    lines.append("\t".join(cells))

        text = "\n".join(lines)

        logger.info(
            f"Word document {file_path.name}: {len(document.paragraphs)} paragraph(s), "
            f"{len(document.tables)} table(s), {len(text)} chars"
        )

        return RawExtraction(text=text)
