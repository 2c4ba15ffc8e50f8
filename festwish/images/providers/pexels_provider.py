"""
Pexels image provider for FestWish.

Searches the Pexels photo API and prefers landscape shots for embeds.
"""

import asyncio
import ssl
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

import aiohttp
import certifi

from ...models import ImageResult, FetchStatus
from ...utils.exceptions import ImageSearchError
from ...utils.logging import get_logger_for_component
from .base import ImageProvider

PEXELS_SEARCH_URL = "https://api.pexels.com/v1/search"


def pick_photo_url(photos: List[Dict[str, Any]]) -> str:
    """First landscape-or-square photo (else the first photo), as a display URL."""
    if not photos:
        return ""
    pick = next(
        (p for p in photos if (p.get("width") or 0) >= (p.get("height") or 0)),
        photos[0],
    )
    src = pick.get("src") or {}
    return src.get("landscape") or src.get("large") or ""


class PexelsProvider(ImageProvider):
    """Pexels photo search."""

    name = "pexels"

    def __init__(self, api_key: str, timeout: int = 20):
        super().__init__(api_key)
        self.timeout = timeout
        self.logger = get_logger_for_component("pexels_provider")
        self.ssl_context = ssl.create_default_context(cafile=certifi.where())

    @asynccontextmanager
    async def get_session(self):
        connector = aiohttp.TCPConnector(ssl=self.ssl_context)
        timeout = aiohttp.ClientTimeout(total=self.timeout)
        headers = {"Authorization": self.api_key, "User-Agent": "FestWish/1.0"}

        async with aiohttp.ClientSession(
            connector=connector, timeout=timeout, headers=headers
        ) as session:
            yield session

    async def _request_json(self, params: Dict[str, str]) -> Any:
        async with self.get_session() as session:
            async with session.get(PEXELS_SEARCH_URL, params=params) as response:
                if response.status != 200:
                    raise ImageSearchError(
                        f"Pexels returned HTTP {response.status}",
                        provider=self.name,
                        context={"status": response.status},
                    )
                return await response.json(content_type=None)

    async def search(self, query: str, per_page: int = 10) -> ImageResult:
        if not self.api_key:
            return ImageResult(status=FetchStatus.ERROR, query=query, error="Pexels API key not configured")

        try:
            payload = await self._request_json({"query": query, "per_page": str(per_page)})
        except asyncio.TimeoutError:
            self.logger.warning(f"Pexels search timed out for '{query}'")
            return ImageResult(status=FetchStatus.ERROR, query=query, error="timeout")
        except (ImageSearchError, aiohttp.ClientError, ValueError) as e:
            self.logger.warning(f"Pexels search failed for '{query}': {e}")
            return ImageResult(status=FetchStatus.ERROR, query=query, error=str(e))

        photos = payload.get("photos") if isinstance(payload, dict) else None
        if not isinstance(photos, list):
            photos = []
        url = pick_photo_url([p for p in photos if isinstance(p, dict)])

        if not url:
            self.logger.debug(f"No usable Pexels photo for '{query}'")
            return ImageResult(status=FetchStatus.EMPTY, query=query)
        return ImageResult(status=FetchStatus.OK, url=url, query=query)
