"""
Daily Scheduler Tests
=====================

Tests for the daily festival pass, run summaries and the service loop.
"""

import asyncio
from datetime import datetime
from unittest.mock import AsyncMock, MagicMock, patch
from zoneinfo import ZoneInfo

import discord
import pytest

from festwish.ai.wish_generator import WishGenerator
from festwish.delivery.message_sender import MessageSender
from festwish.images.image_manager import ImageManager
from festwish.models import (
    Category, EventFetchResult, FetchStatus, GuildSettings, MentionStyle, WishLanguage,
)
from festwish.scheduler.daily_scheduler import DailyScheduler, format_run_summary
from festwish.sources.calendarific_client import CalendarificClient

IST = ZoneInfo("Asia/Kolkata")
NOW = datetime(2025, 10, 20, 1, 0, tzinfo=IST)


@pytest.fixture
def event_client(sample_events):
    client = MagicMock(spec=CalendarificClient)
    client.fetch_holidays = AsyncMock(
        return_value=EventFetchResult(status=FetchStatus.OK, events=sample_events)
    )
    return client


@pytest.fixture
def wish_generator():
    generator = MagicMock(spec=WishGenerator)
    generator.make_wish = AsyncMock(side_effect=lambda date, name, category, lang: f"Wishes for {name}")
    return generator


@pytest.fixture
def image_manager():
    manager = MagicMock(spec=ImageManager)
    manager.get_festival_image = AsyncMock(return_value="https://img/festival.jpg")
    return manager


@pytest.fixture
def scheduler(test_settings, settings_store, memory_cache, event_client, wish_generator, image_manager):
    return DailyScheduler(
        settings=test_settings,
        settings_store=settings_store,
        cache=memory_cache,
        event_client=event_client,
        wish_generator=wish_generator,
        image_manager=image_manager,
        sender=MessageSender(),
    )


def http_response(status):
    response = MagicMock()
    response.status = status
    response.reason = "error"
    return response


class TestDailyRun:

    @pytest.mark.asyncio
    async def test_posts_each_selected_festival(self, scheduler, make_guild, make_channel,
                                                event_client, wish_generator, settings_store):
        general = make_channel(111, "general")
        guild = make_guild(1001, [general])

        summary = await scheduler.run_daily([guild], now=NOW)

        assert summary["success"] is True
        assert summary["events_fetched"] == 5
        assert summary["guilds_processed"] == 1
        assert summary["messages_sent"] == 3
        assert summary["delivery_failures"] == 0
        event_client.fetch_holidays.assert_awaited_once_with(2025, 10, 20)

        wish_generator.make_wish.assert_any_await(
            "2025-10-20", "Diwali/Deepavali", Category.HINDU, WishLanguage.HINGLISH
        )
        titles = [c.kwargs["embed"].title for c in general.send.await_args_list]
        assert titles == [
            "Diwali/Deepavali — Wishes",
            "Eid al-Fitr — Wishes",
            "Christmas — Wishes",
        ]
        assert all(c.kwargs["content"] == "@everyone" for c in general.send.await_args_list)
        assert "1001" in settings_store

    @pytest.mark.asyncio
    async def test_guild_joining_mid_run_does_not_abort(self, scheduler, make_guild, make_channel):
        first_channel = make_channel(111, "general")
        second_channel = make_channel(222, "general")
        guilds = {
            1001: make_guild(1001, [first_channel]),
            1002: make_guild(1002, [second_channel]),
        }
        first_channel.send.side_effect = lambda **kwargs: guilds.setdefault(
            1003, make_guild(1003, [make_channel(333, "general")])
        )

        summary = await scheduler.run_daily(guilds.values(), now=NOW)

        assert summary["success"] is True
        assert summary["guilds_processed"] == 2
        assert second_channel.send.await_count == 3
        guilds[1003].channels[0].send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guild_preferences_applied(self, scheduler, make_guild, make_channel, settings_store):
        settings_store.set("1001", GuildSettings(
            channel_id="222", religions=["christian"], mention=MentionStyle.NONE,
        ))
        target = make_channel(222, "festivals")
        guild = make_guild(1001, [make_channel(111, "general"), target])

        summary = await scheduler.run_daily([guild], now=NOW)

        assert summary["messages_sent"] == 1
        sent = target.send.await_args.kwargs
        assert sent["embed"].title == "Christmas — Wishes"
        assert "content" not in sent

    @pytest.mark.asyncio
    async def test_preview_sends_and_writes_nothing(self, scheduler, make_guild, make_channel,
                                                    wish_generator, image_manager, settings_store,
                                                    memory_cache):
        general = make_channel(111, "general")

        with patch.object(memory_cache, "prune") as prune:
            summary = await scheduler.run_daily([make_guild(1001, [general])], preview=True, now=NOW)

        assert summary["success"] is True
        assert summary["guilds_processed"] == 1
        assert summary["messages_sent"] == 0
        general.send.assert_not_awaited()
        wish_generator.make_wish.assert_not_awaited()
        image_manager.get_festival_image.assert_not_awaited()
        prune.assert_not_called()
        assert len(settings_store) == 0

    @pytest.mark.asyncio
    async def test_prunes_cache_before_run(self, scheduler, memory_cache, make_guild):
        with patch.object(memory_cache, "prune") as prune:
            await scheduler.run_daily([], now=NOW)
        prune.assert_called_once_with("2025-10-20")

    @pytest.mark.asyncio
    async def test_lookup_failure(self, scheduler, event_client, make_guild, make_channel, wish_generator):
        event_client.fetch_holidays.return_value = EventFetchResult(
            status=FetchStatus.ERROR, error="Request timeout after 20s"
        )
        general = make_channel(111, "general")

        summary = await scheduler.run_daily([make_guild(1001, [general])], now=NOW)

        assert summary["success"] is False
        assert summary["message"] == "Festival lookup failed: Request timeout after 20s"
        assert summary["guilds_processed"] == 0
        general.send.assert_not_awaited()
        wish_generator.make_wish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_no_festivals_today(self, scheduler, event_client, make_guild, make_channel):
        event_client.fetch_holidays.return_value = EventFetchResult(status=FetchStatus.EMPTY)
        general = make_channel(111, "general")

        summary = await scheduler.run_daily([make_guild(1001, [general])], now=NOW)

        assert summary["success"] is True
        assert summary["message"] == "No festivals today"
        general.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guild_without_matching_festivals_skipped(self, scheduler, event_client, make_event,
                                                            make_guild, make_channel, settings_store):
        event_client.fetch_holidays.return_value = EventFetchResult(
            status=FetchStatus.OK,
            events=[make_event("Diwali", "Gazetted Holiday", ["National holiday"])],
        )
        settings_store.set("1001", GuildSettings(religions=["muslim"]))
        general = make_channel(111, "general")

        summary = await scheduler.run_daily([make_guild(1001, [general])], now=NOW)

        assert summary["guilds_skipped"] == 1
        assert summary["guilds_processed"] == 0
        general.send.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guild_without_channel_skipped(self, scheduler, make_guild, make_channel, wish_generator):
        guild = make_guild(1001, [make_channel(111, "random")])

        summary = await scheduler.run_daily([guild], now=NOW)

        assert summary["success"] is True
        assert summary["guilds_skipped"] == 1
        wish_generator.make_wish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_guild_failure_does_not_stop_run(self, scheduler, make_guild, make_channel):
        healthy = make_channel(222, "general")
        scheduler.sender = MagicMock(spec=MessageSender)
        scheduler.sender.resolve_channel = AsyncMock(side_effect=[RuntimeError("boom"), healthy])
        scheduler.sender.send_notification = AsyncMock(
            return_value=MagicMock(success=True)
        )

        summary = await scheduler.run_daily([make_guild(1001), make_guild(1002)], now=NOW)

        assert summary["success"] is False
        assert summary["errors_count"] == 1
        assert summary["errors"][0]["guild_id"] == "1001"
        assert summary["guilds_processed"] == 1
        assert summary["messages_sent"] == 3

    @pytest.mark.asyncio
    async def test_delivery_failures_counted(self, scheduler, make_guild, make_channel):
        general = make_channel(111, "general")
        general.send.side_effect = discord.Forbidden(http_response(403), "Missing Permissions")

        summary = await scheduler.run_daily([make_guild(1001, [general])], now=NOW)

        assert summary["success"] is True
        assert summary["messages_sent"] == 0
        assert summary["delivery_failures"] == 3

    @pytest.mark.asyncio
    async def test_unexpected_error_reported(self, scheduler, event_client):
        event_client.fetch_holidays.side_effect = RuntimeError("unexpected")

        summary = await scheduler.run_daily([], now=NOW)

        assert summary["success"] is False
        assert "unexpected" in summary["message"]


class TestSchedule:

    def test_today_uses_configured_timezone(self, scheduler):
        utc_evening = datetime(2025, 10, 19, 20, 0, tzinfo=ZoneInfo("UTC"))
        year, month, day, iso_date, now = scheduler.today(utc_evening)

        assert (year, month, day) == (2025, 10, 20)
        assert iso_date == "2025-10-20"
        assert now.tzinfo == IST

    def test_seconds_until_next_run(self, scheduler):
        assert scheduler.seconds_until_next_run(datetime(2025, 10, 20, 0, 30, tzinfo=IST)) == 1800
        assert scheduler.seconds_until_next_run(datetime(2025, 10, 20, 1, 0, tzinfo=IST)) == 24 * 3600
        assert scheduler.seconds_until_next_run(datetime(2025, 10, 20, 2, 0, tzinfo=IST)) == 23 * 3600

    @pytest.mark.asyncio
    async def test_service_runs_until_stopped(self, scheduler):
        async def run_once(guilds):
            scheduler.stop()
            return {"success": True, "messages_sent": 0, "guilds_processed": 0}

        get_guilds = MagicMock(return_value=[])
        with patch.object(scheduler, "seconds_until_next_run", return_value=0), \
                patch.object(scheduler, "run_daily", side_effect=run_once) as run_daily:
            await scheduler.run_service(get_guilds)

        get_guilds.assert_called_once()
        run_daily.assert_called_once_with([])
        assert scheduler.running is False

    @pytest.mark.asyncio
    async def test_service_cancellation(self, scheduler):
        with patch.object(scheduler, "seconds_until_next_run", return_value=3600):
            task = asyncio.create_task(scheduler.run_service(lambda: []))
            await asyncio.sleep(0)
            task.cancel()
            with pytest.raises(asyncio.CancelledError):
                await task

        assert scheduler.running is False


class TestRunSummary:

    def test_success_summary(self):
        text = format_run_summary({
            "success": True, "duration_seconds": 1.5, "events_fetched": 5,
            "guilds_processed": 2, "guilds_skipped": 1, "messages_sent": 6,
            "delivery_failures": 0, "errors_count": 0, "message": None,
        })

        assert text.startswith("✅ Daily run completed successfully!")
        assert "Messages sent: 6" in text
        assert "Guilds skipped: 1" in text

    def test_failure_summary(self):
        text = format_run_summary({"success": False, "message": "Festival lookup failed: timeout"})
        assert text == "❌ Daily run failed!\n📝 Error: Festival lookup failed: timeout"

    def test_partial_summary(self):
        text = format_run_summary({"success": False, "errors_count": 2, "message": None})
        assert text.startswith("⚠️ Daily run completed with errors")
        assert "Errors encountered: 2" in text
