"""
Page fetcher for web content extraction.
"""
import logging
from typing import Optional

import httpx

from core.config import CRAWL_TIMEOUT_SECONDS, CRAWL_USER_AGENT
from core.exceptions import RequestTimeoutError, UpstreamError

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": CRAWL_USER_AGENT,
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
}


class WebFetcher:
    """Fetches raw HTML with a bounded timeout."""

    def __init__(
        self,
        timeout: float = CRAWL_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self.transport = transport

    async def fetch_html(self, url: str) -> str:
        """
        Fetch a page and return its decoded body.

        Raises:
            RequestTimeoutError: the site did not answer within the timeout
            UpstreamError: non-2xx status (status passed through) or transport failure
        """
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                headers=DEFAULT_HEADERS,
                follow_redirects=True,
                transport=self.transport,
            ) as client:
                response = await client.get(url)
                response.raise_for_status()
                return response.text
        except httpx.TimeoutException:
            logger.warning(f"Timed out fetching {url} after {self.timeout}s")
            raise RequestTimeoutError("The website took too long to respond")
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning(f"Fetching {url} returned HTTP {status}")
            raise UpstreamError(
                f"HTTP {status}: {e.response.reason_phrase}",
                error="Failed to fetch content",
                status_code=status,
            )
        except httpx.RequestError as e:
            logger.warning(f"Failed to fetch {url}: {e}")
            raise UpstreamError(
                str(e) or "Unable to extract content from the URL",
                error="Content extraction failed",
            )


# Global web fetcher instance
web_fetcher = WebFetcher()
