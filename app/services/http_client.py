"""
Async HTTP client for fetching public Airbnb listing pages.

One GET per call with fixed headers and a hard wall-clock deadline.
No retries, backoff or client-side rate limiting.
"""

import asyncio
from typing import Dict, Optional
import httpx
import logging

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 10.0

USER_AGENT = "Mozilla/5.0 (compatible; RoomyBot/1.0; +https://roomy.app)"

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "ko-KR,ko;q=0.9,en-US;q=0.8,en;q=0.7",
    "Cache-Control": "no-cache",
}


class ListingHttpClient:
    """
    Async HTTP client used to fetch listing pages for Open Graph extraction.

    The deadline covers connecting, receiving headers and reading the body.
    When it expires the request is cancelled and ``asyncio.TimeoutError``
    is raised.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        headers: Optional[Dict[str, str]] = None
    ):
        self.timeout = timeout
        self.headers = dict(DEFAULT_HEADERS)
        if headers:
            self.headers.update(headers)

        # Redirects are followed with httpx's default cap
        self.client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    def _get_headers(self) -> Dict[str, str]:
        """Get a copy of the request headers"""
        return dict(self.headers)

    async def get(self, url: str) -> httpx.Response:
        """
        Make a single GET request bounded by the client deadline.

        Raises:
            asyncio.TimeoutError: deadline exceeded
            httpx.HTTPError: transport level failure
        """
        logger.debug(f"Making GET request to {url} (timeout {self.timeout}s)")

        response = await asyncio.wait_for(
            self.client.get(url, headers=self._get_headers()),
            timeout=self.timeout
        )

        logger.debug(f"GET {url} returned {response.status_code}")
        return response

    async def close(self) -> None:
        """Close the HTTP client"""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry"""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
