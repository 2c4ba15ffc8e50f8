"""
FestWish Storage
===============

JSON-file stores for per-guild settings and the daily generation cache.
"""

from .settings_store import GuildSettingsStore
from .generation_cache import GenerationCache, KIND_WISH, KIND_WISH_FALLBACK, KIND_IMAGE

__all__ = [
    'GuildSettingsStore',
    'GenerationCache',
    'KIND_WISH',
    'KIND_WISH_FALLBACK',
    'KIND_IMAGE',
]
