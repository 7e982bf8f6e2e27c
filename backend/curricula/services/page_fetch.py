"""
Fetch a web page as markdown (through a reader service) plus its preview image.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urljoin, urlparse

import httpx

from curricula import exceptions
from curricula.config import settings

logger = logging.getLogger(__name__)

USER_AGENT = "Mozilla/5.0 (compatible; CurriculaBot/1.0)"

_META_PATTERNS = {
    "og:image": [
        re.compile(r'<meta[^>]*property=["\']og:image["\'][^>]*content=["\']([^"\']+)["\']', re.IGNORECASE),
        re.compile(r'<meta[^>]*content=["\']([^"\']+)["\'][^>]*property=["\']og:image["\']', re.IGNORECASE),
    ],
    "twitter:image": [
        re.compile(r'<meta[^>]*name=["\']twitter:image["\'][^>]*content=["\']([^"\']+)["\']', re.IGNORECASE),
        re.compile(r'<meta[^>]*content=["\']([^"\']+)["\'][^>]*name=["\']twitter:image["\']', re.IGNORECASE),
    ],
}


@dataclass(frozen=True)
class FetchedPage:
    markdown: str
    image_url: Optional[str] = None


def validate_page_url(url: str) -> str:
    parsed = urlparse((url or "").strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise exceptions.ValidationError("Invalid URL")
    return url.strip()


def find_preview_image(html: str, page_url: str) -> Optional[str]:
    """
    Return the og:image (falling back to twitter:image) declared in the HTML.

    Relative image paths are resolved against the page URL.
    """
    for key in ("og:image", "twitter:image"):
        for pattern in _META_PATTERNS[key]:
            match = pattern.search(html)
            if match:
                return urljoin(page_url, match.group(1).strip())
    return None


class PageFetcher:
    def __init__(
        self,
        reader_base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.reader_base_url = reader_base_url or settings.READER_BASE_URL
        self.timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, follow_redirects=True, transport=self._transport)

    async def fetch(self, url: str) -> FetchedPage:
        """
        Fetch page content as markdown and a best-effort preview image.

        Raises:
            ValidationError: If the URL is not http(s)
            UpstreamError: If the reader service fails
        """
        url = validate_page_url(url)
        async with self._client() as client:
            markdown = await self._fetch_markdown(client, url)
            image_url = await self._fetch_preview_image(client, url)
        return FetchedPage(markdown=markdown, image_url=image_url)

    async def _fetch_markdown(self, client: httpx.AsyncClient, url: str) -> str:
        reader_url = f"{self.reader_base_url.rstrip('/')}/{url}"
        try:
            response = await client.get(reader_url, headers={"Accept": "text/markdown"})
        except httpx.HTTPError as e:
            logger.error(f"Reader request for {url} failed: {e}")
            raise exceptions.UpstreamError(f"Failed to fetch page: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Reader returned {response.status_code} for {url}")
            raise exceptions.UpstreamError(f"Failed to fetch page: {response.status_code}")
        return response.text

    async def _fetch_preview_image(self, client: httpx.AsyncClient, url: str) -> Optional[str]:
        # Best effort: a missing image never fails the extraction
        try:
            response = await client.get(url, headers={"User-Agent": USER_AGENT})
            response.raise_for_status()
            return find_preview_image(response.text, url)
        except httpx.HTTPError as e:
            logger.warning(f"Failed to extract preview image for {url}: {e}")
            return None
