"""
Base Text Provider Interface
===========================

Abstract base class and result model for the AI providers that write
festival wishes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TextProviderType(str, Enum):
    """Available text provider types."""
    GEMINI = "gemini"


@dataclass
class AIResult:
    """Result from a single text generation request."""
    success: bool
    text: Optional[str] = None
    provider: Optional[str] = None
    model_used: Optional[str] = None
    tokens_used: Optional[int] = None
    processing_time_ms: Optional[int] = None
    error_message: Optional[str] = None

    @property
    def char_count(self) -> int:
        return len((self.text or "").strip())


class TextProvider(ABC):
    """Abstract base class for text provider implementations."""

    def __init__(self, api_key: str, model_name: str, provider_type: TextProviderType):
        """Initialize text provider.

        Args:
            api_key: API key for the provider
            model_name: Model to use for requests
            provider_type: Type of provider
        """
        self.api_key = api_key
        self.model_name = model_name
        self.provider_type = provider_type

    @abstractmethod
    async def generate_text(self, prompt: str) -> AIResult:
        """Generate text for a prompt.

        Args:
            prompt: Complete prompt text

        Returns:
            AIResult with the generated text

        Raises:
            AIError: If the provider rejects the credentials
        """

    @abstractmethod
    async def test_connection(self) -> bool:
        """Test API connection and authentication."""

    def _create_success_result(self, text: str, tokens_used: int = None,
                               processing_time_ms: int = None) -> AIResult:
        return AIResult(
            success=True,
            text=text,
            provider=self.provider_type.value,
            model_used=self.model_name,
            tokens_used=tokens_used,
            processing_time_ms=processing_time_ms,
        )

    def _create_error_result(self, error_message: str) -> AIResult:
        return AIResult(
            success=False,
            provider=self.provider_type.value,
            model_used=self.model_name,
            error_message=error_message,
        )
