"""Image search providers."""

from .base import ImageProvider
from .pexels_provider import PexelsProvider, pick_photo_url

__all__ = ['ImageProvider', 'PexelsProvider', 'pick_photo_url']
