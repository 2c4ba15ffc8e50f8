"""
FestWish AI Module
=================

AI text generation for festival wishes, with a cached templated fallback.
"""

from .providers.base import TextProvider, AIResult
from .providers.gemini_provider import GeminiProvider
from .wish_generator import WishGenerator, build_wish_prompt, create_text_provider, fallback_wish

__all__ = [
    "TextProvider",
    "AIResult",
    "GeminiProvider",
    "WishGenerator",
    "build_wish_prompt",
    "fallback_wish",
    "create_text_provider",
]
