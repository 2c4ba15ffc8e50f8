"""
Google Gemini text provider for FestWish.

Wraps the ``google-generativeai`` async API for single-shot wish generation.
"""

import time
from typing import Any

import google.generativeai as genai

from festwish.ai.providers.base import TextProvider, TextProviderType, AIResult
from festwish.utils.exceptions import AIError, ErrorCode
from festwish.utils.logging import get_logger_for_component


class GeminiProvider(TextProvider):
    """Google Gemini provider for festival wish text."""

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash",
                 temperature: float = 0.9, max_tokens: int = 400):
        """Initialize Gemini provider.

        Args:
            api_key: Google Gemini API key
            model_name: Model to use (default: gemini-2.5-flash)
            temperature: Sampling temperature
            max_tokens: Maximum output tokens

        Raises:
            AIError: If the API key is missing
        """
        if not api_key:
            raise AIError(
                "Gemini API key is required",
                provider="gemini",
                error_code=ErrorCode.AI_INVALID_CREDENTIALS
            )

        super().__init__(api_key, model_name, TextProviderType.GEMINI)
        self.temperature = temperature
        self.max_tokens = max_tokens

        genai.configure(api_key=api_key)
        self.model = genai.GenerativeModel(model_name=model_name)

        self.logger = get_logger_for_component("gemini_provider")
        self.logger.info(f"Gemini provider initialized with model: {model_name}")

    async def generate_text(self, prompt: str) -> AIResult:
        """Generate text using Gemini.

        Transport errors, empty responses and safety blocks become error
        results; only an invalid API key is raised.
        """
        start_time = time.time()

        try:
            response = await self._make_gemini_request(prompt)

            try:
                text = (response.text or "").strip()
            except ValueError as e:
                # Raised by the SDK when the candidate was blocked or is empty
                self.logger.warning(f"Gemini response blocked or empty: {e}")
                return self._create_error_result("Content blocked or empty")

            processing_time_ms = int((time.time() - start_time) * 1000)
            usage = getattr(response, 'usage_metadata', None)
            total_tokens = getattr(usage, 'total_token_count', None) if usage else None

            self.logger.debug(f"Gemini generated {len(text)} chars in {processing_time_ms}ms")
            return self._create_success_result(
                text=text,
                tokens_used=total_tokens,
                processing_time_ms=processing_time_ms,
            )

        except Exception as e:
            message = str(e).lower()
            if "api key" in message or "authentication" in message:
                raise AIError(
                    "Invalid Gemini API key",
                    provider="gemini",
                    error_code=ErrorCode.AI_INVALID_CREDENTIALS
                ) from e
            self.logger.error(f"Gemini generation error: {e}")
            return self._create_error_result(f"Gemini API error: {e}")

    async def test_connection(self) -> bool:
        try:
            self.logger.info("Testing Gemini connection...")
            result = await self.generate_text("Respond with exactly: 'Connection test successful'")
        except AIError as e:
            self.logger.error(f"Gemini connection test failed: {e}")
            return False

        success = result.success and "successful" in (result.text or "").lower()
        if success:
            self.logger.info("Gemini connection test successful")
        else:
            self.logger.warning("Gemini connection test failed - unexpected response")
        return success

    async def _make_gemini_request(self, prompt: str) -> Any:
        return await self.model.generate_content_async(
            prompt,
            generation_config=genai.types.GenerationConfig(
                temperature=self.temperature,
                max_output_tokens=self.max_tokens,
            )
        )

    def __str__(self) -> str:
        return f"GeminiProvider(model={self.model_name})"
