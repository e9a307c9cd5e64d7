"""Shared fixtures for findoc tests.

Settings are read once at import time, so the data directory is pointed at a
throwaway folder before anything from findoc is imported.
"""
import os
import tempfile
from pathlib import Path

import pytest

os.environ["DATA_DIR"] = tempfile.mkdtemp(prefix="findoc-tests-")
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["OTEL_ENABLED"] = "false"

from findoc.core.exceptions import NetworkError  # noqa: E402
from findoc.services.web_client import FetchedPage  # noqa: E402


class FakeOCREngine:
    """Stands in for OCREngine; returns canned text and records what it saw."""

    def __init__(self, text="", error=None, confidence=0.9):
        self.text = text
        self.error = error
        self.confidence = confidence
        self.seen = []
        self.pdf_pages = []

    def recognize(self, image):
        self.seen.append(image)
        if self.error:
            raise self.error
        return self.text

    def recognize_pdf_page(self, file_path, page_number):
        self.pdf_pages.append(page_number)
        return {"page_number": page_number, "text": self.text, "confidence": self.confidence}


class StubWebClient:
    """Serves fixed HTML per URL; unknown URLs fail like an unreachable host."""

    def __init__(self, pages=None):
        self.pages = pages or {}
        self.requested = []

    def fetch(self, url):
        self.requested.append(url)
        if url not in self.pages:
            raise NetworkError(url, "connection refused")
        html = self.pages[url]
        title = ""
        if "<title>" in html:
            title = html.split("<title>", 1)[1].split("</title>", 1)[0].strip()
        return FetchedPage(url=url, html=html, title=title)


@pytest.fixture
def fake_ocr():
    return FakeOCREngine()


@pytest.fixture
def processor(fake_ocr):
    from findoc.services.file_processing_service import FileProcessingService

    return FileProcessingService(ocr_engine=fake_ocr)


# ==================== Sample files ====================

@pytest.fixture
def make_workbook(tmp_path):
    """Build an .xlsx from {sheet name: rows}."""
    from openpyxl import Workbook

    def _make(sheets, name="statements.xlsx") -> Path:
        workbook = Workbook()
        workbook.remove(workbook.active)
        for title, rows in sheets.items():
            sheet = workbook.create_sheet(title=title)
            for row in rows:
                sheet.append(row)
        path = tmp_path / name
        workbook.save(path)
        return path

    return _make


@pytest.fixture
def make_csv(tmp_path):
    def _make(content: str, name="figures.csv") -> Path:
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _make


@pytest.fixture
def make_pdf(tmp_path):
    """Build a PDF with one page per text block (empty string = blank page)."""
    import fitz

    def _make(pages, name="report.pdf") -> Path:
        document = fitz.open()
        for text in pages:
            page = document.new_page()
            if text:
                page.insert_text((72, 72), text, fontsize=11)
        path = tmp_path / name
        document.save(path)
        document.close()
        return path

    return _make


@pytest.fixture
def make_docx(tmp_path):
    import docx

    def _make(paragraphs, table=None, name="report.docx") -> Path:
        document = docx.Document()
        for paragraph in paragraphs:
            document.add_paragraph(paragraph)
        if table:
            grid = document.add_table(rows=len(table), cols=len(table[0]))
            for r, row in enumerate(table):
                for c, value in enumerate(row):
                    grid.cell(r, c).text = value
        path = tmp_path / name
        document.save(path)
        return path

    return _make


@pytest.fixture
def make_image(tmp_path):
    from PIL import Image

    def _make(size=(400, 200), name="scan.png", color=(240, 240, 240)) -> Path:
        path = tmp_path / name
        Image.new("RGB", size, color).save(path)
        return path

    return _make


# ==================== Web ====================

FINANCIAL_PAGE = """
<html>
<head><title>Q4 Results</title><script>var tracking = "revenue";</script></head>
<body>
<nav>Menu Investors</nav>
<header>Site header</header>
<main>
  <h1>Annual Results 2023</h1>
  <p>Strong growth across all segments.</p>
</main>
<table class="summary">
  <caption>Income ($ millions)</caption>
  <thead><tr><th>Income Statement</th><th>Fiscal Year 2023</th></tr></thead>
  <tbody>
    <tr><td>Revenue</td><td>$1,200</td></tr>
    <tr><td>Net Income</td><td>300</td></tr>
    <tr><td>Gross Margin</td><td>45</td></tr>
  </tbody>
</table>
<table>
  <tr><td>Contact</td><td>Email</td></tr>
  <tr><td>Press</td><td>press@example.com</td></tr>
</table>
<div class="financial-table">
  <div class="header">Item</div><div class="header">Quarter 2</div>
  <div class="row"><span class="cell">Sales</span><span class="cell">500</span></div>
  <div class="row"><span class="cell">Costs</span><span class="cell">(200)</span></div>
  <div class="row"><span class="cell">Units</span><span class="cell">75</span></div>
</div>
<footer>Copyright</footer>
</body>
</html>
"""

TEXT_ONLY_PAGE = """
<html><head><title>Press release</title></head>
<body><article>Income Statement highlights. Revenue: $900 Net Income: 120</article></body>
</html>
"""


@pytest.fixture
def stub_client():
    return StubWebClient({
        "https://example.com/results": FINANCIAL_PAGE,
        "https://example.com/press": TEXT_ONLY_PAGE,
    })


@pytest.fixture
def scraper(stub_client):
    from findoc.services.web_scraping_service import WebScraper

    return WebScraper(client=stub_client)
