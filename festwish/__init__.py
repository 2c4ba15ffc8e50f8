"""
FestWish - Festival Wishes for Discord
======================================

Posts a daily AI-written wish for each festival in the configured country to
every Discord server the bot is in.

Main Components:
- Configuration: environment variables with Pydantic validation
- Event Source: Calendarific holiday lookup
- Processing: keyword classification and per-guild filtering
- Generation: Gemini wish text and Pexels images with a per-day cache
- Discord Bot: slash-command settings and the daily scheduler
"""

__version__ = "1.0.0"
__author__ = "FestWish Development Team"
__description__ = "Daily festival wishes for Discord servers"

from .config.settings import get_settings
from .utils.logging import configure_application_logging, get_logger_for_component
from .utils.exceptions import FestWishError

__all__ = [
    "get_settings",
    "configure_application_logging",
    "get_logger_for_component",
    "FestWishError",
]
