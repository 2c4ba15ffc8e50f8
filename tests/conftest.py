"""
PyTest Configuration and Fixtures
=================================

Shared fixtures and configuration for FestWish tests.
"""

import os
import random
from unittest.mock import AsyncMock, MagicMock

import discord
import pytest

# Set test environment variables before any imports
os.environ["FESTWISH_DISCORD__BOT_TOKEN"] = "test-discord-token-for-foundation-testing"
os.environ["FESTWISH_PROVIDERS__CALENDARIFIC_API_KEY"] = "test-calendarific-key"
os.environ["FESTWISH_PROVIDERS__GEMINI_API_KEY"] = "test-gemini-key-for-foundation-testing"
os.environ["FESTWISH_PROVIDERS__PEXELS_API_KEY"] = "test-pexels-key"
os.environ["FESTWISH_DEBUG"] = "true"

from festwish.config.settings import FestWishSettings
from festwish.models import EventRecord
from festwish.storage.generation_cache import GenerationCache
from festwish.storage.settings_store import GuildSettingsStore


# ============================================================================
# Settings and Store Fixtures
# ============================================================================


@pytest.fixture
def test_settings(tmp_path):
    """Settings pointing every file at a temporary directory."""
    return FestWishSettings(
        discord={"bot_token": "test-token"},
        storage={
            "settings_path": str(tmp_path / "guildConfigs.json"),
            "cache_path": str(tmp_path / "wishCache.json"),
        },
        logging={"file_path": None, "console_logging": False},
    )


@pytest.fixture
def settings_store(tmp_path):
    """File-backed guild settings store in a temp directory."""
    return GuildSettingsStore(str(tmp_path / "guildConfigs.json")).load()


@pytest.fixture
def memory_cache():
    """In-memory generation cache."""
    return GenerationCache(None).load()


@pytest.fixture
def seeded_rng():
    return random.Random(1234)


# ============================================================================
# Sample Data Fixtures
# ============================================================================


@pytest.fixture
def make_event():
    """Factory for provider-shaped holiday records."""

    def _make(name, primary_type="", types=None, description=""):
        return EventRecord.from_provider({
            "name": name,
            "description": description,
            "type": types or [],
            "primary_type": primary_type,
        })

    return _make


@pytest.fixture
def sample_events(make_event):
    """A realistic mix of holidays for a single day."""
    return [
        make_event("Diwali/Deepavali", "Gazetted Holiday", ["National holiday"]),
        make_event("Eid al-Fitr", "Gazetted Holiday", ["National holiday"]),
        make_event("Christmas", "Gazetted Holiday", ["National holiday"]),
        make_event("Bhai Dooj", "Restricted Holiday", ["Observance"]),
        make_event("Gandhi Jayanti", "Gazetted Holiday", ["National holiday"]),
    ]


# ============================================================================
# Discord Doubles
# ============================================================================


@pytest.fixture
def make_channel():
    """Factory for text-capable channel doubles with an async ``send``."""

    def _make(channel_id=111, name="festivals", channel_type=discord.ChannelType.text):
        channel = MagicMock()
        channel.id = channel_id
        channel.name = name
        channel.type = channel_type
        channel.send = AsyncMock()
        return channel

    return _make


@pytest.fixture
def make_guild():
    """Factory for guild doubles holding a list of channels."""

    def _make(guild_id=1001, channels=None, name="Test Guild"):
        channels = list(channels or [])
        by_id = {c.id: c for c in channels}

        guild = MagicMock()
        guild.id = guild_id
        guild.name = name
        guild.channels = channels
        guild.get_channel_or_thread = MagicMock(side_effect=lambda cid: by_id.get(cid))
        guild.fetch_channel = AsyncMock(side_effect=discord.NotFound(http_response(404), "Unknown Channel"))
        return guild

    return _make


def http_response(status: int, reason: str = "error"):
    """Minimal aiohttp-like response object for discord.HTTPException."""
    response = MagicMock()
    response.status = status
    response.reason = reason
    return response
