"""
Festival Wish Generation
=======================

Produces the wish text for a festival: cached text first, then a single AI
request, then a templated fallback.
"""

from typing import Optional

from ..models import Category, WishLanguage
from ..storage.generation_cache import GenerationCache, KIND_WISH, KIND_WISH_FALLBACK
from ..utils.exceptions import AIError, StorageError
from ..utils.logging import get_logger_for_component
from .providers.base import TextProvider

_LANGUAGE_LINES = {
    WishLanguage.HINGLISH: "Hinglish (simple Hindi + English)",
    WishLanguage.ENGLISH: "simple, friendly English",
}


def build_wish_prompt(
    festival_name: str,
    category: Optional[Category],
    language: WishLanguage = WishLanguage.HINGLISH,
) -> str:
    """Prompt asking for a single short, inclusive festival wish."""
    faith = category.value if category else "India, multi-faith"
    return f"""You are a friendly Indian community bot writing short festival wishes.

Constraints:
- Language: {_LANGUAGE_LINES[language]}.
- Length target: about 300-400 characters (one short paragraph).
- Tone: warm, inclusive, natural; not robotic; no proselytizing.
- Emojis: 1-3 total (e.g., 🪔🎉🌙🎄) placed naturally.
- Theme: celebrate {festival_name}, wish peace, health, prosperity, unity.
- Audience: gaming/creator community, multi-faith, family-friendly.
- Output: plain text only.

Write a unique wish for "{festival_name}" ({faith})."""


def fallback_wish(festival_name: str, language: WishLanguage = WishLanguage.HINGLISH) -> str:
    """Templated wish used when the AI text is unavailable or too short."""
    if language == WishLanguage.ENGLISH:
        return (
            f"✨ Warm wishes on {festival_name}! May your heart be full of joy, your home "
            f"full of blessings and everyone around you healthy and at peace. Today let's "
            f"celebrate positivity, love and unity together. 🌟"
        )
    return (
        f"✨ {festival_name} ki hardik shubhkamnayein! Dil mein khushi, ghar mein barkat "
        f"aur sabke liye sehat-sukoon bane rahe. Aaj ke din hum sab milkar positivity, "
        f"pyaar aur unity ko celebrate karein. 🌟"
    )


class WishGenerator:
    """Cache-backed wish text generator."""

    def __init__(
        self,
        provider: Optional[TextProvider],
        cache: GenerationCache,
        min_length: int = 220,
        pin_fallbacks: bool = False,
    ):
        """Initialize wish generator.

        Args:
            provider: Text provider, or None to always use the template
            cache: Shared generation cache
            min_length: Minimum accepted AI wish length after stripping
            pin_fallbacks: Reuse a cached fallback for the rest of the day
                instead of retrying the provider
        """
        self.provider = provider
        self.cache = cache
        self.min_length = min_length
        self.pin_fallbacks = pin_fallbacks
        self.logger = get_logger_for_component("wish_generator")

    async def make_wish(
        self,
        iso_date: str,
        festival_name: str,
        category: Optional[Category],
        language: WishLanguage = WishLanguage.HINGLISH,
    ) -> str:
        """Return the wish for a festival on a date; never raises for provider failures."""
        cached = self.cache.get(iso_date, KIND_WISH, festival_name)
        if cached:
            self.logger.debug(f"Wish cache hit for {festival_name}")
            return cached

        cached_fallback = self.cache.get(iso_date, KIND_WISH_FALLBACK, festival_name)
        if cached_fallback and self.pin_fallbacks:
            return cached_fallback

        text = await self._generate(festival_name, category, language)
        if text:
            self._remember(iso_date, KIND_WISH, festival_name, text)
            if cached_fallback:
                self._forget_fallback(iso_date, festival_name)
            return text

        if cached_fallback:
            return cached_fallback

        fallback = fallback_wish(festival_name, language)
        self._remember(iso_date, KIND_WISH_FALLBACK, festival_name, fallback)
        return fallback

    async def _generate(
        self, festival_name: str, category: Optional[Category], language: WishLanguage
    ) -> Optional[str]:
        if self.provider is None:
            return None

        prompt = build_wish_prompt(festival_name, category, language)
        try:
            result = await self.provider.generate_text(prompt)
        except AIError as e:
            self.logger.warning(f"Text provider failed for {festival_name}; using template: {e}")
            return None

        if not result.success:
            self.logger.warning(
                f"Text provider returned no wish for {festival_name}: {result.error_message}"
            )
            return None

        text = (result.text or "").strip()
        if len(text) < self.min_length:
            self.logger.info(
                f"Rejected {len(text)}-char wish for {festival_name} "
                f"(minimum {self.min_length}); using template"
            )
            return None
        return text

    def _remember(self, iso_date: str, kind: str, festival_name: str, text: str) -> None:
        try:
            self.cache.set(iso_date, kind, festival_name, text)
        except StorageError as e:
            self.logger.warning(f"Could not cache {kind} for {festival_name}: {e}")

    def _forget_fallback(self, iso_date: str, festival_name: str) -> None:
        try:
            self.cache.delete(iso_date, KIND_WISH_FALLBACK, festival_name)
        except StorageError as e:
            self.logger.warning(f"Could not drop cached fallback for {festival_name}: {e}")


def create_text_provider(settings) -> Optional[TextProvider]:
    """Build the Gemini provider from settings, or None when no key is set."""
    from .providers.gemini_provider import GeminiProvider

    providers = settings.providers
    if not providers.gemini_api_key:
        return None
    return GeminiProvider(
        api_key=providers.gemini_api_key,
        model_name=providers.gemini_model,
        temperature=providers.temperature,
        max_tokens=providers.max_tokens,
    )
