"""
FestWish Images Module
=====================

Stock-photo lookup for festival embeds.
"""

from .image_manager import ImageManager, IMAGE_QUERY_TEMPLATES, create_image_provider, query_candidates
from .providers import ImageProvider, PexelsProvider

__all__ = [
    'ImageManager',
    'IMAGE_QUERY_TEMPLATES',
    'create_image_provider',
    'query_candidates',
    'ImageProvider',
    'PexelsProvider',
]
