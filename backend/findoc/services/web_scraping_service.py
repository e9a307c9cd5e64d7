"""
Web Scraping Service - fetch a page, parse it, convert its tables to records.

A failed fetch never raises out of scrape_url: it comes back as a result with
status=error and title "Error". scrape_financial_statements is the strict
variant and raises NetworkError instead.
"""
import time
from functools import lru_cache
from typing import List, Optional

from findoc.core.exceptions import NetworkError
from findoc.models.document import (
    ExtractedRecord, ParsedTable, ScrapeMetadata, ScrapeStatus, WebScrapeResult,
)
from findoc.models.schema import WebScrapeRequest
from findoc.services.web_client import WebClient
from findoc.utils.converters import (
    extract_records_from_text, web_table_to_record, web_text_provenance,
)
from findoc.utils.extractors.html_extractor import parse_page
from findoc.utils.helper import elapsed_ms, generate_id
from findoc.utils.logger import get_logger

logger = get_logger(__name__)


def tables_to_records(tables: List[ParsedTable], url: str) -> List[ExtractedRecord]:
    """Convert scraped tables in page order; tables without values are skipped."""
    records: List[ExtractedRecord] = []
    for index, table in enumerate(tables):
        record = web_table_to_record(table, url=url, index=index)
        if record is not None:
            records.append(record)
    return records


class WebScraper:
    """Scrapes financial tables and text from web pages."""

    def __init__(self, client: Optional[WebClient] = None):
        self.client = client or WebClient()

    def scrape_url(self, request: WebScrapeRequest) -> WebScrapeResult:
        """
        Scrape one page.

        Args:
            request: URL plus parse options

        Returns:
            WebScrapeResult; status=error when the page could not be fetched
        """
        start = time.perf_counter()
        logger.info(f"Starting web scrape: {request.url}")

        try:
            page = self.client.fetch(request.url)
        except NetworkError as e:
            logger.error(f"Web scrape failed: {request.url}: {e}")
            return WebScrapeResult(
                id=generate_id("scrape"),
                url=request.url,
                title="Error",
                status=ScrapeStatus.ERROR,
                error=str(e),
            )

        parsed = parse_page(
            page.html,
            selectors=request.selectors,
            extract_tables=request.extract_tables,
            extract_text=request.extract_text,
        )

        records = tables_to_records(parsed.tables, request.url)
        if parsed.text:
            records.extend(
                extract_records_from_text(parsed.text, web_text_provenance(request.url))
            )

        processing_time = elapsed_ms(start, time.perf_counter())

        logger.info(
            f"Web scrape completed: {request.url} "
            f"tables={len(parsed.tables)}, records={len(records)}, {processing_time:.1f}ms"
        )

        return WebScrapeResult(
            id=generate_id("scrape"),
            url=request.url,
            title=page.title or parsed.title,
            tables=parsed.tables,
            text=parsed.text,
            financial_records=records,
            metadata=ScrapeMetadata(
                processing_time=processing_time,
                tables_found=len(parsed.tables),
                text_length=len(parsed.text),
            ),
            status=ScrapeStatus.SUCCESS,
        )

    def scrape_financial_statements(self, url: str) -> List[ExtractedRecord]:
        """
        Table-derived records only.

        Raises:
            NetworkError: The page could not be fetched
        """
        result = self.scrape_url(WebScrapeRequest(url=url))

        if result.status == ScrapeStatus.ERROR.value:
            raise NetworkError(url, result.error or "Scraping failed")

        return tables_to_records(result.tables, url)


# ==================== Convenience Functions ====================

@lru_cache()
def get_web_scraper() -> WebScraper:
    """Process-wide scraper instance (FastAPI dependency)."""
    return WebScraper()


def scrape_and_extract(
        url: str,
        options: Optional[WebScrapeRequest] = None,
        scraper: Optional[WebScraper] = None,
) -> WebScrapeResult:
    """
    Scrape a page with optional parse options.

    Args:
        url: Page to fetch
        options: selectors / extract_tables / extract_text; url is taken from
            the first argument
        scraper: Scraper to use, the shared one by default

    Returns:
        WebScrapeResult
    """
    request = (
        options.model_copy(update={"url": url}) if options else WebScrapeRequest(url=url)
    )
    return (scraper or get_web_scraper()).scrape_url(request)
