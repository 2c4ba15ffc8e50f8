"""
Base Image Provider Interface
============================

Abstract base class for stock-photo search providers.
"""

from abc import ABC, abstractmethod

from ...models import ImageResult


class ImageProvider(ABC):
    """Abstract base class for image search providers."""

    name = "base"

    def __init__(self, api_key: str):
        self.api_key = api_key

    @abstractmethod
    async def search(self, query: str, per_page: int = 10) -> ImageResult:
        """Search for a single representative image.

        Args:
            query: Free-text search query
            per_page: Number of candidates to consider

        Returns:
            ImageResult; failures are reported through its status, never raised
        """
