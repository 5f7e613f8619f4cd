import logging
from typing import Optional

import httpx

from ..errors import ExtractionError
from ..html_text import readable_text

logger = logging.getLogger(__name__)


class PageFetcher:
    """Fetches source pages over HTTP and reduces them to readable text."""

    def __init__(self, timeout: float = 30.0, user_agent: Optional[str] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.timeout = timeout
        self.headers = {
            "User-Agent": user_agent or "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36",
            "Accept": "text/html,application/xhtml+xml",
        }
        self.transport = transport

    async def fetch_html(self, url: str) -> str:
        """Fetch a page; any transport or HTTP status failure is an ExtractionError."""
        logger.info(f"🌐 Fetching source page: {url}")
        try:
            async with httpx.AsyncClient(timeout=self.timeout, headers=self.headers,
                                         follow_redirects=True, transport=self.transport) as http_client:
                response = await http_client.get(url)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ExtractionError(f"Could not fetch {url}: {e}") from e
        return response.text

    async def fetch_page_text(self, url: str) -> str:
        """Fetch a page and return its readable text."""
        page_html = await self.fetch_html(url)
        text = readable_text(page_html)
        if not text:
            raise ExtractionError(f"No readable text found at {url}")
        logger.info(f"📄 Extracted {len(text)} characters from {url}")
        return text
