"""
Web client - fetches a page over HTTP with the configured timeout and user agent.

Every transport failure (DNS, refused connection, timeout, non-2xx status)
surfaces as a NetworkError.
"""
from dataclasses import dataclass
from typing import Optional

import httpx
from bs4 import BeautifulSoup

from findoc.core.config import settings
from findoc.core.exceptions import NetworkError
from findoc.utils.extractors.html_extractor import page_title
from findoc.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class FetchedPage:
    url: str
    html: str
    title: str


class WebClient:
    """Thin httpx wrapper returning (html, title)."""

    def __init__(
            self,
            timeout: Optional[float] = None,
            user_agent: Optional[str] = None,
            transport: Optional[httpx.BaseTransport] = None,
    ):
        self.timeout = timeout or settings.SCRAPING_TIMEOUT
        self.user_agent = user_agent or settings.SCRAPING_USER_AGENT
        self._transport = transport

    def fetch(self, url: str) -> FetchedPage:
        """
        Fetch a page.

        Raises:
            NetworkError: Request failed, timed out or returned an error status
        """
        logger.debug(f"GET {url} (timeout={self.timeout}s)")

        try:
            with httpx.Client(
                    timeout=self.timeout,
                    headers={"User-Agent": self.user_agent},
                    follow_redirects=True,
                    transport=self._transport,
            ) as client:
                response = client.get(url)
                response.raise_for_status()
        except httpx.TimeoutException as e:
            raise NetworkError(url, f"timed out after {self.timeout}s") from e
        except httpx.HTTPStatusError as e:
            raise NetworkError(url, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise NetworkError(url, str(e) or type(e).__name__) from e

        html = response.text
        title = page_title(BeautifulSoup(html, "html.parser"))

        logger.debug(f"Fetched {url}: {len(html)} bytes, title='{title}'")
        return FetchedPage(url=str(response.url), html=html, title=title)
