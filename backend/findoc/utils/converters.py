"""
Record converters - turn extractor output into ExtractedRecord objects.

- grid_to_record: spreadsheet / CSV grids (label column 0, value column 1)
- web_table_to_record: scraped tables, with web provenance
- extract_records_from_text: statement-indicator pattern search for flowed text
"""
import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from findoc.core.config import settings
from findoc.models.document import (
    ExtractedRecord, ExtractionMethod, FileProvenance, ParsedTable,
    RecordMetadata, StatementType, WebProvenance,
)
from findoc.utils.classifier import (
    determine_financial_type, grid_header_text, is_financial_data,
)
from findoc.utils.helper import generate_id
from findoc.utils.logger import get_logger
from findoc.utils.normalizer import (
    extract_currency, extract_period, is_valid_number, parse_numeric_value,
)

logger = get_logger(__name__)

_NUMBER = r"\$?([\d,]+(?:\.\d+)?)"


# ==================== Grid conversion ====================

def grid_values(rows: Sequence[Sequence[Any]]) -> Dict[str, float]:
    """
    Pair column 0 (label) with column 1 (value). Rows with a missing label,
    a missing value or a value that is not a finite number are skipped.
    """
    values: Dict[str, float] = {}
    for row in rows:
        if len(row) < 2:
            continue

        label, raw_value = row[0], row[1]
        if label is None or raw_value is None:
            continue

        key = str(label).strip()
        if not key or (isinstance(raw_value, str) and not raw_value.strip()):
            continue

        value = parse_numeric_value(raw_value)
        if is_valid_number(value):
            values[key] = value

    return values


def _grid_text(grid: Sequence[Sequence[Any]]) -> str:
    return " ".join(str(cell) for row in grid for cell in row if cell is not None)


def grid_to_record(
        grid: Sequence[Sequence[Any]],
        label: str,
        file_name: str,
) -> Optional[ExtractedRecord]:
    """
    Convert a row-major grid (header row first) into one record.

    Args:
        grid: Rows, header row at index 0
        label: Sheet name or table label; the period is read from it
        file_name: Originating file name for provenance

    Returns:
        ExtractedRecord, or None when the grid is not financial
    """
    if not is_financial_data(grid):
        return None

    values = grid_values(grid[1:])

    return ExtractedRecord(
        id=generate_id("data"),
        statement_type=determine_financial_type(grid_header_text(grid)),
        period=extract_period(label),
        values=values,
        metadata=RecordMetadata(
            currency=extract_currency(_grid_text(grid), default=settings.DEFAULT_CURRENCY),
            units=settings.DEFAULT_UNITS,
            source=FileProvenance(
                file_path=file_name,
                sheet_name=label,
                extraction_method=ExtractionMethod.STRUCTURED_PARSING.value,
            ),
        ),
    )


def table_to_record(table: ParsedTable, file_name: str) -> Optional[ExtractedRecord]:
    """Grid conversion for a ParsedTable produced by a tabular extractor."""
    label = table.metadata.get("sheet_name") or file_name
    return grid_to_record(table.as_grid(), label=label, file_name=file_name)


# ==================== Web table conversion ====================

def web_table_to_record(table: ParsedTable, url: str, index: int) -> Optional[ExtractedRecord]:
    """
    Convert a scraped table. Tables with fewer than 2 rows or without a
    single numeric value produce nothing.
    """
    if len(table.rows) < 2:
        return None

    values = grid_values(table.rows)
    if not values:
        return None

    header_text = " ".join(table.headers)
    surrounding = " ".join([header_text, table.metadata.get("caption") or ""])

    return ExtractedRecord(
        id=generate_id("data"),
        statement_type=determine_financial_type(table.headers),
        period=extract_period(header_text),
        values=values,
        metadata=RecordMetadata(
            currency=extract_currency(surrounding, default=settings.DEFAULT_CURRENCY),
            units=settings.DEFAULT_UNITS,
            source=WebProvenance(
                url=url,
                page_number=index + 1,
                table_index=index,
                extraction_method=ExtractionMethod.WEB_SCRAPING.value,
            ),
        ),
    )


# ==================== Pattern search over flowed text ====================

@dataclass(frozen=True)
class StatementPattern:
    """An indicator phrase plus the labelled figures captured when it appears."""
    statement_type: StatementType
    indicator: re.Pattern
    captures: Dict[str, re.Pattern]


STATEMENT_PATTERNS: List[StatementPattern] = [
    StatementPattern(
        statement_type=StatementType.INCOME_STATEMENT,
        indicator=re.compile(r"(?:income\s+statement|profit\s+and\s+loss|p&l)", re.IGNORECASE),
        captures={
            "revenue": re.compile(r"revenue[:\s]*" + _NUMBER, re.IGNORECASE),
            "netIncome": re.compile(r"net\s+income[:\s]*" + _NUMBER, re.IGNORECASE),
        },
    ),
    StatementPattern(
        statement_type=StatementType.BALANCE_SHEET,
        indicator=re.compile(r"(?:balance\s+sheet|statement\s+of\s+financial\s+position)", re.IGNORECASE),
        captures={
            "totalAssets": re.compile(r"total\s+assets[:\s]*" + _NUMBER, re.IGNORECASE),
            "totalLiabilities": re.compile(r"total\s+liabilities[:\s]*" + _NUMBER, re.IGNORECASE),
        },
    ),
    StatementPattern(
        statement_type=StatementType.CASH_FLOW,
        indicator=re.compile(r"(?:cash\s+flow|statement\s+of\s+cash\s+flows)", re.IGNORECASE),
        captures={
            "operatingCashFlow": re.compile(r"operating\s+cash\s+flow[:\s]*" + _NUMBER, re.IGNORECASE),
            "investingCashFlow": re.compile(r"investing\s+cash\s+flow[:\s]*" + _NUMBER, re.IGNORECASE),
        },
    ),
]


def capture_values(text: str, captures: Dict[str, re.Pattern]) -> Dict[str, float]:
    """Run every capture once; only successful captures are returned."""
    values: Dict[str, float] = {}
    for key, pattern in captures.items():
        match = pattern.search(text)
        if not match:
            continue
        value = parse_numeric_value(match.group(1))
        if is_valid_number(value):
            values[key] = value
    return values


ProvenanceFactory = Callable[[], Any]


def extract_records_from_text(
        text: str,
        provenance_factory: ProvenanceFactory,
) -> List[ExtractedRecord]:
    """
    Pattern-search conversion shared by the PDF, Word, image and web paths.

    Each statement indicator found in the text yields at most one record, and
    only when at least one of its figures was captured. A document therefore
    produces 0-3 records.

    Args:
        text: Raw extracted text
        provenance_factory: Builds a fresh provenance object per record
    """
    if not text:
        return []

    records: List[ExtractedRecord] = []
    period = extract_period(text)
    currency = extract_currency(text, default=settings.DEFAULT_CURRENCY)

    for pattern in STATEMENT_PATTERNS:
        if not pattern.indicator.search(text):
            continue

        values = capture_values(text, pattern.captures)
        if not values:
            logger.debug(f"Indicator for {pattern.statement_type.value} found but no figures captured")
            continue

        records.append(ExtractedRecord(
            id=generate_id("data"),
            statement_type=pattern.statement_type,
            period=period,
            values=values,
            metadata=RecordMetadata(
                currency=currency,
                units=settings.DEFAULT_UNITS,
                source=provenance_factory(),
            ),
        ))

    return records


def file_text_provenance(file_name: str) -> ProvenanceFactory:
    """Provenance factory for pattern-matched records from an uploaded file."""
    def factory() -> FileProvenance:
        return FileProvenance(
            file_path=file_name,
            extraction_method=ExtractionMethod.PATTERN_MATCHING.value,
        )
    return factory


def web_text_provenance(url: str) -> ProvenanceFactory:
    """Provenance factory for pattern-matched records from page body text."""
    def factory() -> WebProvenance:
        return WebProvenance(
            url=url,
            page_number=1,
            table_index=0,
            extraction_method=ExtractionMethod.PATTERN_MATCHING.value,
        )
    return factory
