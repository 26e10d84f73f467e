"""HTTP page fetcher with browser-like headers and rate-limit detection."""

import logging
from typing import Any, Optional
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from citebot.services.errors import FetchFailed, ParseFailed, RateLimited

DEFAULT_TIMEOUT = 10.0

# Scholar and ACL Anthology reject bare default clients
BROWSER_HEADERS = {
    "User-Agent": (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/125.0.0.0 Safari/537.36"
    ),
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}


class PageFetcher:
    """Fetches HTML pages and returns them parsed."""

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize fetcher.

        Args:
            session: HTTP session to reuse (a new one is created if omitted)
            timeout: Request timeout in seconds
            logger: Logger for request tracing
        """
        self.session = session or requests.Session()
        self.timeout = timeout
        self.log = logger or logging.getLogger(__name__)

    def fetch(self, url: str) -> BeautifulSoup:
        """GET *url* and parse the body as HTML.

        Raises:
            RateLimited: On HTTP 429
            FetchFailed: On any other non-2xx status or network error
            ParseFailed: If the body cannot be parsed
        """
        self.log.debug("GET %s", url)
        try:
            response = self.session.get(
                url, headers=BROWSER_HEADERS, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise FetchFailed(url, cause=e) from e

        self.log.debug("Response: %s for %s", response.status_code, url)
        if response.status_code == 429:
            raise RateLimited(urlparse(url).hostname or url)
        if not 200 <= response.status_code < 300:
            raise FetchFailed(url, status=response.status_code)

        try:
            return BeautifulSoup(response.text, "html.parser")
        except Exception as e:
            raise ParseFailed(url, cause=e) from e

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "PageFetcher":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()
