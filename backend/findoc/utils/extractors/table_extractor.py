"""
Table Extractors - spreadsheet and delimited-text inputs.

Single responsibility: read a tabular file into row-major grids.
- SpreadsheetExtractor: every worksheet of an XLSX/XLS workbook
- CSVExtractor: one grid, first row = field names
"""
import math
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

from findoc.models.document import (
    DocumentFormat, ExtractionMethod, ParsedTable, RawExtraction,
)
from findoc.utils.classifier import is_financial_data
from findoc.utils.extractors.base import BaseExtractor
from findoc.utils.logger import get_logger

logger = get_logger(__name__)

CSV_CHUNK_SIZE = 10_000
CSV_ENCODINGS = ("utf-8-sig", "latin-1")


def _cell(value: Any) -> Any:
    """Grid cell as float/str; missing cells become empty strings."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, float) and math.isnan(value):
        return ""
    if isinstance(value, (int, float)):
        return value
    if hasattr(value, "item"):  # numpy scalar
        return _cell(value.item())
    return str(value).strip()


def _is_blank(row: Sequence[Any]) -> bool:
    return all(cell == "" for cell in row)


def rows_to_table(rows: List[List[Any]], **metadata) -> ParsedTable:
    """Build a ParsedTable from raw rows, header row first."""
    cleaned = [[_cell(value) for value in row] for row in rows]
    cleaned = [row for row in cleaned if not _is_blank(row)]

    if not cleaned:
        return ParsedTable(headers=[], rows=[], metadata=metadata)

    headers = [str(cell) for cell in cleaned[0]]
    return ParsedTable(headers=headers, rows=cleaned[1:], metadata=metadata)


class SpreadsheetExtractor(BaseExtractor):
    """Reads every worksheet of a workbook into a grid."""

    format = DocumentFormat.EXCEL
    extraction_method = ExtractionMethod.EXCEL_PARSING

    def extract(self, file_path: Path) -> RawExtraction:
        """
        Extract one ParsedTable per worksheet.

        Args:
            file_path: Path to an .xlsx or .xls workbook

        Returns:
            RawExtraction with one table per non-empty sheet; extra carries
            sheet_count and financial_sheet_count
        """
        logger.info(f"Reading workbook: {file_path.name}")

        sheets = pd.read_excel(file_path, sheet_name=None, header=None, dtype=object)

        tables: List[ParsedTable] = []
        financial_sheets = 0

        for position, (sheet_name, frame) in enumerate(sheets.items()):
            table = rows_to_table(
                frame.values.tolist(),
                sheet_name=str(sheet_name),
                position=position,
            )
            if not table.headers:
                logger.debug(f"Sheet '{sheet_name}' is empty, skipping")
                continue

            if is_financial_data(table.as_grid()):
                financial_sheets += 1

            tables.append(table)
            logger.debug(
                f"Sheet '{sheet_name}': {table.row_count}x{table.column_count}"
            )

        logger.info(
            f"Workbook {file_path.name}: {len(sheets)} sheet(s), "
            f"{financial_sheets} financial"
        )

        return RawExtraction(
            tables=tables,
            extra={
                "sheet_count": len(sheets),
                "financial_sheet_count": financial_sheets,
            },
        )


class CSVExtractor(BaseExtractor):
    """Streams a delimited file into a single grid."""

    format = DocumentFormat.CSV
    extraction_method = ExtractionMethod.CSV_PARSING

    def extract(self, file_path: Path) -> RawExtraction:
        """
        Drain the whole file before returning - classification needs every row.

        Args:
            file_path: Path to a .csv file

        Returns:
            RawExtraction with a single table; extra carries row_count
        """
        logger.info(f"Reading CSV: {file_path.name}")

        last_error = None
        for encoding in CSV_ENCODINGS:
            try:
                headers, rows = self._read_rows(file_path, encoding)
                break
            except UnicodeDecodeError as e:
                logger.warning(f"CSV not {encoding} encoded, retrying: {e}")
                last_error = e
        else:
            raise last_error

        if not headers:
            logger.info(f"CSV {file_path.name} is empty")
            return RawExtraction(tables=[], extra={"row_count": 0})

        table = rows_to_table([headers] + rows, position=0)

        logger.info(f"CSV {file_path.name}: {table.row_count} row(s)")

        return RawExtraction(tables=[table], extra={"row_count": table.row_count})

    def _read_rows(self, file_path: Path, encoding: str):
        headers: List[str] = []
        rows: List[List[Any]] = []

        try:
            width = len(pd.read_csv(file_path, nrows=0, encoding=encoding).columns)
        except pd.errors.EmptyDataError:
            return [], []

        def keep_wide_row(line: List[str]) -> List[str]:
            # Rows wider than the header keep their leading cells
            logger.debug(f"CSV row has {len(line)} fields, header has {width}")
            return line[:width]

        try:
            reader = pd.read_csv(
                file_path,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
                encoding=encoding,
                chunksize=CSV_CHUNK_SIZE,
                engine="python",
                on_bad_lines=keep_wide_row,
            )
            with reader:
                for chunk in reader:
                    if not headers:
                        headers = [str(column).strip() for column in chunk.columns]
                    rows.extend(chunk.values.tolist())
        except pd.errors.EmptyDataError:
            return [], []

        return headers, rows
