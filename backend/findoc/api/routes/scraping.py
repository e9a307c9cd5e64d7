"""
Web Scraping Routes.

POST /scrape fetches and parses a page, persists the result (successful or
not) and returns it. A failed fetch is reported in the body with
status=error, not as an HTTP error.
"""
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from findoc.api.deps import get_scraper_dep, get_store_dep
from findoc.models.document import WebScrapeResult
from findoc.models.schema import WebScrapeRequest, WebScrapeSummary
from findoc.services.extraction_store import ExtractionStore, scrape_to_summary
from findoc.services.web_scraping_service import WebScraper
from findoc.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


@router.post("/scrape", response_model=WebScrapeResult)
def scrape(
        request: WebScrapeRequest,
        scraper: WebScraper = Depends(get_scraper_dep),
        store: ExtractionStore = Depends(get_store_dep),
):
    """Scrape one page for financial tables and text."""
    logger.info(f"Scrape requested: {request.url}")

    result = scraper.scrape_url(request)
    store.save_scrape(result)
    return result


@router.get("/results", response_model=List[WebScrapeSummary])
def list_results(store: ExtractionStore = Depends(get_store_dep)):
    """Stored scrapes, newest first."""
    return [scrape_to_summary(s) for s in store.list_scrapes()]


@router.delete("/{scrape_id}")
def delete_result(scrape_id: str, store: ExtractionStore = Depends(get_store_dep)):
    if not store.delete_scrape(scrape_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Scrape not found: {scrape_id}")
    return {"status": "success", "message": f"Deleted {scrape_id}"}
