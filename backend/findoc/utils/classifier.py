"""
Financial-Table Classifier - decides whether a grid is financial and which
statement it is.

Pure functions; identical input always gives identical output.
"""
from typing import Any, List, Sequence

from findoc.models.document import ParsedTable, StatementType

FINANCIAL_KEYWORDS = [
    "revenue", "income", "profit", "loss", "assets", "liabilities",
    "equity", "cash", "debt", "sales", "expenses", "costs",
    "earnings", "ebitda", "margin", "ratio", "growth", "return",
]

# Web pages label their tables with period/scale words too
WEB_TABLE_KEYWORDS = FINANCIAL_KEYWORDS + [
    "quarter", "year", "period", "million", "billion", "thousand",
]

MIN_WEB_TABLE_ROWS = 3
MIN_WEB_TABLE_COLUMNS = 2


def _joined(cells: Sequence[Any]) -> str:
    return " ".join(str(cell) for cell in cells if cell is not None).lower()


def _contains_keyword(text: str, keywords: Sequence[str]) -> bool:
    return any(keyword in text for keyword in keywords)


def grid_header_text(grid: Sequence[Sequence[Any]]) -> List[str]:
    """
    Header cells of a grid: the column headers (row 0) followed by the row
    headers (the label in column 0 of every data row).
    """
    if not grid:
        return []
    headers = [str(cell) for cell in grid[0] if cell is not None]
    row_labels = [str(row[0]) for row in grid[1:] if row and row[0] is not None]
    return headers + row_labels


def is_financial_data(grid: Sequence[Sequence[Any]]) -> bool:
    """
    True iff the grid has at least 2 rows and its header text mentions a
    financial keyword.
    """
    if not isinstance(grid, (list, tuple)) or len(grid) < 2:
        return False

    if not isinstance(grid[0], (list, tuple)):
        return False

    return _contains_keyword(_joined(grid_header_text(grid)), FINANCIAL_KEYWORDS)


def determine_financial_type(headers: Sequence[Any]) -> StatementType:
    """
    Statement type from header text. Checks run income -> balance -> cash flow,
    so a header naming both revenue and assets is an income statement.
    """
    header_text = _joined(headers)

    if "revenue" in header_text or "income" in header_text or "profit" in header_text:
        return StatementType.INCOME_STATEMENT
    if "assets" in header_text or "liabilities" in header_text or "equity" in header_text:
        return StatementType.BALANCE_SHEET
    if "cash" in header_text or "flow" in header_text:
        return StatementType.CASH_FLOW

    return StatementType.TRANSACTION_DATA


def is_financial_table(table: ParsedTable) -> bool:
    """
    Table-level heuristic for scraped pages: financial headers, at least one
    numeric cell, and a substantial size.
    """
    has_financial_headers = _contains_keyword(_joined(table.headers), WEB_TABLE_KEYWORDS)

    has_numeric_data = any(
        isinstance(cell, float) for row in table.rows for cell in row
    )

    is_substantial = (
        len(table.rows) >= MIN_WEB_TABLE_ROWS
        and len(table.headers) >= MIN_WEB_TABLE_COLUMNS
    )

    return has_financial_headers and has_numeric_data and is_substantial
