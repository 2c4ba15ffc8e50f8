"""
AI Providers Package
===================

Text provider implementations for festival wish generation.
"""

from .base import TextProvider, TextProviderType, AIResult
from .gemini_provider import GeminiProvider

__all__ = ['TextProvider', 'TextProviderType', 'AIResult', 'GeminiProvider']
