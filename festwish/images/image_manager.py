"""
Festival Image Selection
=======================

Chooses a themed search query for a festival and caches the resulting
image URL for the day.
"""

import random
from typing import Dict, List, Optional

from ..config.settings import FestWishSettings, ImageProviderName
from ..models import Category
from ..storage.generation_cache import GenerationCache, KIND_IMAGE
from ..utils.exceptions import StorageError
from ..utils.logging import get_logger_for_component
from .providers.base import ImageProvider
from .providers.pexels_provider import PexelsProvider

IMAGE_QUERY_TEMPLATES: Dict[Optional[Category], List[str]] = {
    Category.HINDU: [
        "{name} celebration India",
        "diya lamps festival lights bokeh",
        "rangoli festive decor",
    ],
    Category.MUSLIM: [
        "{name} celebration crescent moon mosque lights",
        "eid lanterns (fanous) night sky",
        "henna hands festive lights",
    ],
    Category.CHRISTIAN: [
        "{name} celebration church lights",
        "christmas tree warm lights ornaments",
        "candles star nativity festive",
    ],
    None: ["{name} festival India celebration"],
}


def query_candidates(festival_name: str, category: Optional[Category]) -> List[str]:
    templates = IMAGE_QUERY_TEMPLATES.get(category) or IMAGE_QUERY_TEMPLATES[None]
    return [t.format(name=festival_name) for t in templates]


def create_image_provider(settings: FestWishSettings) -> Optional[ImageProvider]:
    """Build the configured image provider, or None when images are disabled."""
    providers = settings.providers
    if providers.image_provider == ImageProviderName.PEXELS and providers.pexels_api_key:
        return PexelsProvider(providers.pexels_api_key, timeout=settings.limits.request_timeout)
    return None


class ImageManager:
    """Cache-backed festival image lookup."""

    def __init__(
        self,
        provider: Optional[ImageProvider],
        cache: GenerationCache,
        rng: Optional[random.Random] = None,
        per_page: int = 10,
    ):
        self.provider = provider
        self.cache = cache
        self.rng = rng or random.Random()
        self.per_page = per_page
        self.logger = get_logger_for_component("image_manager")

    async def get_festival_image(
        self, iso_date: str, festival_name: str, category: Optional[Category]
    ) -> str:
        """Image URL for a festival, or an empty string when none is available."""
        cached = self.cache.get(iso_date, KIND_IMAGE, festival_name)
        if cached:
            return cached

        if self.provider is None:
            return ""

        query = self.rng.choice(query_candidates(festival_name, category))
        result = await self.provider.search(query, per_page=self.per_page)
        if not result.success:
            self.logger.info(f"No image for {festival_name} (query '{query}', status {result.status.value})")
            return ""

        try:
            self.cache.set(iso_date, KIND_IMAGE, festival_name, result.url)
        except StorageError as e:
            self.logger.warning(f"Could not cache image for {festival_name}: {e}")
        return result.url
