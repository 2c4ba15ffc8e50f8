"""
Storage Tests
=============

Tests for the guild settings store and the generation cache.
"""

import json
import os
from datetime import date
from unittest.mock import patch

import pytest

from festwish.models import Category, GuildSettings, MentionStyle
from festwish.storage.generation_cache import (
    GenerationCache, KIND_IMAGE, KIND_WISH, KIND_WISH_FALLBACK, cache_key,
)
from festwish.storage.settings_store import GuildSettingsStore
from festwish.utils.exceptions import StorageError


class TestGuildSettingsStore:
    """Test per-guild settings persistence."""

    def test_get_unknown_guild_returns_defaults(self, settings_store):
        assert settings_store.get("999") == GuildSettings()
        assert "999" not in settings_store

    def test_set_persists_full_mapping(self, tmp_path):
        path = tmp_path / "guildConfigs.json"
        store = GuildSettingsStore(str(path)).load()
        store.set("1", GuildSettings(channel_id="10", mention=MentionStyle.HERE))
        store.set("2", GuildSettings(major_only=False))

        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert on_disk["1"]["channelId"] == "10"
        assert on_disk["1"]["mention"] == "here"
        assert on_disk["2"]["majorOnly"] is False

        reloaded = GuildSettingsStore(str(path)).load()
        assert reloaded.get("1").mention == MentionStyle.HERE
        assert len(reloaded) == 2
        assert sorted(reloaded.guild_ids()) == ["1", "2"]

    def test_partial_record_merged_with_defaults(self, tmp_path):
        path = tmp_path / "guildConfigs.json"
        path.write_text(json.dumps({"5": {"religions": ["muslim"]}}), encoding="utf-8")

        settings = GuildSettingsStore(str(path)).get("5")
        assert settings.religions == [Category.MUSLIM]
        assert settings.major_only is True
        assert settings.channel_id is None

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "guildConfigs.json"
        path.write_text("{not json", encoding="utf-8")

        store = GuildSettingsStore(str(path)).load()
        assert len(store) == 0
        assert store.get("1") == GuildSettings()

    def test_invalid_record_falls_back_to_defaults(self, tmp_path):
        path = tmp_path / "guildConfigs.json"
        path.write_text(json.dumps({"5": {"mention": "shout"}}), encoding="utf-8")

        assert GuildSettingsStore(str(path)).get("5") == GuildSettings()

    def test_invalid_field_keeps_other_overrides(self, tmp_path):
        path = tmp_path / "guildConfigs.json"
        path.write_text(json.dumps({
            "5": {"channelId": "999", "mention": "loud", "majorOnly": False, "religions": "hindu"},
        }), encoding="utf-8")

        settings = GuildSettingsStore(str(path)).get("5")

        assert settings.channel_id == "999"
        assert settings.major_only is False
        assert settings.mention == MentionStyle.EVERYONE
        assert settings.religions == list(Category)

    def test_write_failure_raises_storage_error(self, settings_store):
        with patch("festwish.storage.settings_store.write_json_mapping", side_effect=OSError("disk full")):
            with pytest.raises(StorageError):
                settings_store.set("1", GuildSettings())

    def test_memory_only_store(self):
        store = GuildSettingsStore()
        store.set("1", GuildSettings(channel_id="3"))
        assert store.get("1").channel_id == "3"

    def test_no_temp_files_left_behind(self, tmp_path):
        store = GuildSettingsStore(str(tmp_path / "guildConfigs.json"))
        store.set("1", GuildSettings())
        assert os.listdir(tmp_path) == ["guildConfigs.json"]


class TestGenerationCache:
    """Test the per-day generation cache."""

    def test_key_format(self):
        assert cache_key("2025-10-20", KIND_WISH, "Diwali") == "2025-10-20|wish:Diwali"

    def test_set_get_persist(self, tmp_path):
        path = tmp_path / "wishCache.json"
        cache = GenerationCache(str(path)).load()
        cache.set("2025-10-20", KIND_WISH, "Diwali", "Happy Diwali")

        on_disk = json.loads(path.read_text(encoding="utf-8"))
        assert on_disk == {"2025-10-20|wish:Diwali": "Happy Diwali"}

        reloaded = GenerationCache(str(path)).load()
        assert reloaded.get("2025-10-20", KIND_WISH, "Diwali") == "Happy Diwali"
        assert reloaded.get("2025-10-21", KIND_WISH, "Diwali") is None

    def test_kinds_are_separate(self, memory_cache):
        memory_cache.set("2025-10-20", KIND_WISH_FALLBACK, "Diwali", "template")
        assert memory_cache.get("2025-10-20", KIND_WISH, "Diwali") is None
        assert memory_cache.get("2025-10-20", KIND_WISH_FALLBACK, "Diwali") == "template"

    def test_delete(self, memory_cache):
        memory_cache.set("2025-10-20", KIND_IMAGE, "Diwali", "https://img")
        assert memory_cache.delete("2025-10-20", KIND_IMAGE, "Diwali") is True
        assert memory_cache.delete("2025-10-20", KIND_IMAGE, "Diwali") is False

    def test_prune_drops_old_and_malformed(self):
        cache = GenerationCache(None, retention_days=7)
        cache.set("2025-10-01", KIND_WISH, "Navratri", "old")
        cache.set("2025-10-13", KIND_WISH, "Karva Chauth", "edge")
        cache.set("2025-10-20", KIND_WISH, "Diwali", "today")
        cache._data["garbage-key"] = "x"

        removed = cache.prune(date(2025, 10, 20))

        assert removed == 2
        assert cache.get("2025-10-13", KIND_WISH, "Karva Chauth") == "edge"
        assert cache.get("2025-10-20", KIND_WISH, "Diwali") == "today"
        assert len(cache) == 2

    def test_prune_accepts_iso_string(self):
        cache = GenerationCache(None, retention_days=1)
        cache.set("2025-10-18", KIND_IMAGE, "Dhanteras", "u")
        assert cache.prune("2025-10-20") == 1

    def test_prune_disabled(self):
        cache = GenerationCache(None, retention_days=0)
        cache.set("2000-01-01", KIND_WISH, "Holi", "ancient")
        assert cache.prune(date(2025, 10, 20)) == 0
        assert len(cache) == 1

    def test_stats(self, memory_cache):
        memory_cache.set("2025-10-20", KIND_WISH, "Diwali", "a")
        memory_cache.set("2025-10-20", KIND_WISH_FALLBACK, "Bhai Dooj", "b")
        memory_cache.set("2025-10-20", KIND_IMAGE, "Diwali", "c")
        memory_cache.set("2025-10-20", KIND_IMAGE, "Bhai Dooj", "d")

        assert memory_cache.stats() == {"wish": 1, "wish-fallback": 1, "img": 2, "total": 4}

    def test_write_failure_raises_storage_error(self, tmp_path):
        cache = GenerationCache(str(tmp_path / "wishCache.json")).load()
        with patch("festwish.storage.generation_cache.write_json_mapping", side_effect=OSError("ro")):
            with pytest.raises(StorageError):
                cache.set("2025-10-20", KIND_WISH, "Diwali", "x")
