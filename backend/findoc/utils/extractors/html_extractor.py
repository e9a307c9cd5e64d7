"""
HTML Extractor - visible text and financial tables from markup.

- Page chrome (script/style/nav/header/footer) is dropped before anything is read
- Text comes from content containers, falling back to <body>
- Tables come from <table> elements and div-based grids, and are kept only
  when they look financial
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from findoc.models.document import Cell, ParsedTable
from findoc.utils.classifier import is_financial_table
from findoc.utils.helper import clean_text
from findoc.utils.logger import get_logger
from findoc.utils.normalizer import parse_cell_value

logger = get_logger(__name__)

CHROME_TAGS = ["script", "style", "nav", "header", "footer"]

CONTENT_SELECTORS = [
    "main",
    "article",
    ".content",
    ".main-content",
    "#content",
    ".financial-data",
    ".earnings",
    ".results",
]

DIV_TABLE_SELECTOR = ".table, .data-table, .financial-table"
DIV_HEADER_SELECTOR = ".header, .row-header, .th"
DIV_ROW_SELECTOR = ".row, .data-row, .tr"
DIV_CELL_SELECTOR = ".cell, .td, .data"


@dataclass
class ParsedPage:
    title: str = ""
    text: str = ""
    tables: List[ParsedTable] = field(default_factory=list)


def page_title(soup: BeautifulSoup) -> str:
    if soup.title and soup.title.string:
        return soup.title.string.strip()
    return ""


def _cell_text(element: Tag) -> str:
    return element.get_text(" ", strip=True)


def _headers_or_blank(headers: List[str], rows: List[List[Cell]]) -> List[str]:
    if headers:
        return headers
    return [""] * (len(rows[0]) if rows else 0)


def parse_html_table(table: Tag, index: int) -> Optional[ParsedTable]:
    """
    Parse one <table>. Headers come from <thead> when present, else from the
    first row; every following row becomes a data row.
    """
    headers: List[str] = []
    all_rows = table.find_all("tr")

    thead = table.find("thead")
    if thead is not None:
        headers = [_cell_text(th) for th in thead.find_all(["th", "td"])]
        body_rows = [tr for tr in all_rows if tr.find_parent("thead") is None]
    else:
        first = all_rows[0] if all_rows else None
        if first is not None:
            headers = [_cell_text(cell) for cell in first.find_all(["th", "td"])]
        body_rows = all_rows[1:]

    headers = [h for h in headers if h]

    rows: List[List[Cell]] = []
    for tr in body_rows:
        row = [parse_cell_value(_cell_text(cell)) for cell in tr.find_all(["td", "th"])]
        if row and any(cell != "" for cell in row):
            rows.append(row)

    if not headers and not rows:
        return None

    caption = table.find("caption")
    return ParsedTable(
        headers=_headers_or_blank(headers, rows),
        rows=rows,
        metadata={
            "caption": _cell_text(caption) if caption else None,
            "class_name": " ".join(table.get("class", [])) or None,
            "position": index,
        },
    )


def parse_div_table(container: Tag, index: int) -> Optional[ParsedTable]:
    """Parse a div-based grid (.header cells, .row rows of .cell cells)."""
    headers = [
        text for text in (_cell_text(h) for h in container.select(DIV_HEADER_SELECTOR)) if text
    ]

    rows: List[List[Cell]] = []
    for row_element in container.select(DIV_ROW_SELECTOR):
        row = [
            parse_cell_value(_cell_text(cell))
            for cell in row_element.select(DIV_CELL_SELECTOR)
        ]
        if row:
            rows.append(row)

    if not headers and not rows:
        return None

    return ParsedTable(
        headers=_headers_or_blank(headers, rows),
        rows=rows,
        metadata={
            "class_name": " ".join(container.get("class", [])) or None,
            "position": index,
        },
    )


def extract_page_text(soup: BeautifulSoup, selectors: Optional[Sequence[str]] = None) -> str:
    """
    Concatenate text from every matching content container; caller selectors
    are tried before the defaults. Falls back to the whole body.
    """
    parts: List[str] = []
    for selector in list(selectors or []) + CONTENT_SELECTORS:
        for element in soup.select(selector):
            parts.append(element.get_text(" "))

    text = clean_text("\n".join(parts))
    if not text:
        body = soup.body or soup
        text = clean_text(body.get_text(" "))
    return text


def extract_page_tables(soup: BeautifulSoup) -> List[ParsedTable]:
    """All financial-looking tables, <table> elements first then div grids."""
    tables: List[ParsedTable] = []

    for index, element in enumerate(soup.find_all("table")):
        table = parse_html_table(element, index)
        if table and is_financial_table(table):
            tables.append(table)

    # A <table class="table"> was already handled above
    div_tables = [el for el in soup.select(DIV_TABLE_SELECTOR) if el.name != "table"]
    for index, element in enumerate(div_tables):
        table = parse_div_table(element, index)
        if table and is_financial_table(table):
            tables.append(table)

    return tables


def parse_page(
        html: str,
        selectors: Optional[Sequence[str]] = None,
        extract_tables: bool = True,
        extract_text: bool = True,
) -> ParsedPage:
    """Parse fetched markup into title, visible text and financial tables."""
    soup = BeautifulSoup(html, "html.parser")
    page = ParsedPage(title=page_title(soup))

    for element in soup.find_all(CHROME_TAGS):
        element.decompose()

    if extract_text:
        page.text = extract_page_text(soup, selectors)

    if extract_tables:
        page.tables = extract_page_tables(soup)

    logger.debug(f"Parsed page '{page.title}': {len(page.tables)} financial table(s)")
    return page

