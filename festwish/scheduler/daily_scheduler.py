"""
FestWish Daily Scheduler
=======================

Orchestrates the daily festival pass: fetch today's holidays once, then for
every guild filter them, resolve a channel and post one embed per festival.

Also hosts the in-process service loop that fires the pass at a fixed local
time every day.
"""

import asyncio
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Optional, Tuple, Union

from ..ai.wish_generator import WishGenerator, create_text_provider
from ..config.settings import FestWishSettings, get_settings
from ..delivery.embed_formatter import build_notification
from ..delivery.message_sender import MessageSender
from ..images.image_manager import ImageManager, create_image_provider
from ..models import EventRecord, FetchStatus
from ..processing.classifier import filter_events
from ..sources.calendarific_client import CalendarificClient
from ..storage.generation_cache import GenerationCache
from ..storage.settings_store import GuildSettingsStore
from ..utils.exceptions import StorageError
from ..utils.logging import PerformanceLogger, get_logger_for_component

GuildsProvider = Callable[[], Union[Iterable[Any], Awaitable[Iterable[Any]]]]


class DailyScheduler:
    """
    Coordinates the daily festival pass across all guilds.

    Collaborators are built from settings unless injected.
    """

    def __init__(
        self,
        settings: Optional[FestWishSettings] = None,
        settings_store: Optional[GuildSettingsStore] = None,
        cache: Optional[GenerationCache] = None,
        event_client: Optional[CalendarificClient] = None,
        wish_generator: Optional[WishGenerator] = None,
        image_manager: Optional[ImageManager] = None,
        sender: Optional[MessageSender] = None,
    ):
        self.settings = settings or get_settings()
        self.logger = get_logger_for_component("scheduler")

        storage = self.settings.storage
        providers = self.settings.providers
        limits = self.settings.limits

        # Stores define __len__, so an empty one is falsy
        if settings_store is None:
            settings_store = GuildSettingsStore(storage.settings_path)
        if cache is None:
            cache = GenerationCache(storage.cache_path, storage.cache_retention_days)
        self.settings_store = settings_store
        self.cache = cache
        self.event_client = event_client or CalendarificClient(
            providers.calendarific_api_key,
            country=self.settings.schedule.country,
            timeout=limits.request_timeout,
        )
        self.wish_generator = wish_generator or WishGenerator(
            create_text_provider(self.settings),
            self.cache,
            min_length=limits.min_wish_length,
            pin_fallbacks=storage.pin_fallbacks,
        )
        self.image_manager = image_manager or ImageManager(
            create_image_provider(self.settings),
            self.cache,
            per_page=limits.image_candidates,
        )
        self.sender = sender or MessageSender(self.settings.discord.fallback_channel_names)

        self.running = False
        self._reset_counters()

    def _reset_counters(self) -> None:
        self.execution_id = f"daily_{datetime.now().strftime('%Y%m%d_%H%M%S')}"
        self.start_time: Optional[datetime] = None
        self.events_fetched = 0
        self.guilds_processed = 0
        self.guilds_skipped = 0
        self.messages_sent = 0
        self.delivery_failures = 0
        self.errors_encountered: List[Dict[str, Any]] = []

    def today(self, now: Optional[datetime] = None) -> Tuple[int, int, int, str, datetime]:
        """Current (year, month, day, iso_date, now) in the configured timezone."""
        tz = self.settings.tz
        now = now.astimezone(tz) if now else datetime.now(tz)
        return now.year, now.month, now.day, now.date().isoformat(), now

    async def run_daily(self, guilds: Iterable[Any], preview: bool = False,
                        now: Optional[datetime] = None) -> Dict:
        """
        Execute one daily pass.

        Args:
            guilds: Guild objects the bot is a member of
            preview: Only log what would be posted; no generation, sends or writes
            now: Override for the current time

        Returns:
            Dictionary summary of the run
        """
        self._reset_counters()
        self.start_time = datetime.now()
        self.logger.info(
            "Starting daily festival run",
            extra={"execution_id": self.execution_id, "preview": preview},
        )

        try:
            year, month, day, iso_date, now = self.today(now)

            if not preview:
                self._prune_cache(iso_date)

            fetch_result = await self.event_client.fetch_holidays(year, month, day)
            self.events_fetched = len(fetch_result.events)
            if fetch_result.status == FetchStatus.ERROR:
                self.logger.error(f"Festival lookup failed, nothing will be posted: {fetch_result.error}")
                return self._create_result_summary(
                    success=False, message=f"Festival lookup failed: {fetch_result.error}"
                )
            if fetch_result.status == FetchStatus.EMPTY:
                self.logger.info(f"No holidays listed for {iso_date}")
                return self._create_result_summary(success=True, message="No festivals today")

            events = fetch_result.events

            # Snapshot; the client's guild view can change while a guild is awaited
            for guild in list(guilds):
                try:
                    await self._process_guild(guild, events, iso_date, now, preview)
                except Exception as e:
                    self.logger.error(
                        f"Guild {guild.id} processing failed: {e}",
                        extra={"guild_id": str(guild.id)},
                        exc_info=True,
                    )
                    self.errors_encountered.append(
                        {"guild_id": str(guild.id), "error": str(e), "timestamp": datetime.now()}
                    )

            summary = self._create_result_summary(success=not self.errors_encountered)
            self.logger.info(
                "Daily festival run completed",
                extra={
                    "execution_id": self.execution_id,
                    "duration_seconds": summary["duration_seconds"],
                    "guilds_processed": self.guilds_processed,
                    "messages_sent": self.messages_sent,
                    "errors": len(self.errors_encountered),
                },
            )
            return summary

        except Exception as e:
            error_msg = f"Daily run failed: {e}"
            self.logger.error(error_msg, exc_info=True)
            return self._create_result_summary(success=False, message=error_msg)

    def _prune_cache(self, iso_date: str) -> None:
        try:
            self.cache.prune(iso_date)
        except StorageError as e:
            self.logger.warning(f"Cache pruning skipped: {e}")

    async def _process_guild(self, guild, events: List[EventRecord], iso_date: str,
                             now: datetime, preview: bool) -> None:
        guild_id = str(guild.id)
        settings = self.settings_store.get(guild_id)

        festivals = filter_events(events, settings)
        if not festivals:
            self.guilds_skipped += 1
            self.logger.debug(f"No festivals for guild {guild_id}")
            return

        channel = await self.sender.resolve_channel(guild, settings.channel_id)
        if channel is None:
            self.guilds_skipped += 1
            self.logger.warning(f"No usable channel in guild {guild_id}; skipping")
            return

        names = ", ".join(event.name for event, _ in festivals)
        if preview:
            self.logger.info(f"[preview] guild {guild_id} -> #{channel.name}: {names}")
            self.guilds_processed += 1
            return

        mention = settings.mention.prefix
        with PerformanceLogger(self.logger, f"guild {guild_id} delivery", guild_id=guild_id):
            for event, category in festivals:
                wish = await self.wish_generator.make_wish(iso_date, event.name, category, settings.lang)
                image_url = await self.image_manager.get_festival_image(iso_date, event.name, category)
                payload = build_notification(event.name, category, wish, image_url, now, mention)

                result = await self.sender.send_notification(channel, payload, guild_id)
                if result.success:
                    self.messages_sent += 1
                else:
                    self.delivery_failures += 1

        self.settings_store.set(guild_id, settings)
        self.guilds_processed += 1

    def _create_result_summary(self, success: bool, message: str = None) -> Dict:
        duration = (
            (datetime.now() - self.start_time).total_seconds() if self.start_time else 0
        )
        summary = {
            "execution_id": self.execution_id,
            "success": success,
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "duration_seconds": duration,
            "events_fetched": self.events_fetched,
            "guilds_processed": self.guilds_processed,
            "guilds_skipped": self.guilds_skipped,
            "messages_sent": self.messages_sent,
            "delivery_failures": self.delivery_failures,
            "errors_count": len(self.errors_encountered),
            "message": message,
        }
        if self.errors_encountered:
            summary["errors"] = self.errors_encountered
        return summary

    def seconds_until_next_run(self, now: Optional[datetime] = None) -> float:
        """Seconds from now until the next configured local run time."""
        tz = self.settings.tz
        now = now.astimezone(tz) if now else datetime.now(tz)
        schedule = self.settings.schedule
        target = now.replace(
            hour=schedule.daily_run_hour, minute=schedule.daily_run_minute,
            second=0, microsecond=0,
        )
        if target <= now:
            target += timedelta(days=1)
        return (target - now).total_seconds()

    async def run_service(self, get_guilds: GuildsProvider, retry_delay: float = 300) -> None:
        """Run the daily pass forever at the configured local time."""
        schedule = self.settings.schedule
        self.running = True
        self.logger.info(
            f"Daily service scheduled for {schedule.daily_run_hour:02d}:"
            f"{schedule.daily_run_minute:02d} {schedule.timezone}"
        )

        while self.running:
            try:
                delay = self.seconds_until_next_run()
                self.logger.debug(f"Next daily run in {delay / 3600:.2f}h")
                await asyncio.sleep(delay)

                guilds = get_guilds()
                if asyncio.iscoroutine(guilds):
                    guilds = await guilds
                result = await self.run_daily(list(guilds))

                if result["success"]:
                    self.logger.info(
                        f"Daily run completed: {result['messages_sent']} messages "
                        f"across {result['guilds_processed']} guilds"
                    )
                else:
                    self.logger.error(f"Daily run failed: {result.get('message') or 'see errors'}")

            except asyncio.CancelledError:
                self.logger.info("Daily service cancelled")
                self.running = False
                raise
            except Exception as e:
                self.logger.error(f"Service error: {e}", exc_info=True)
                await asyncio.sleep(retry_delay)

        self.logger.info("Daily service stopped")

    def stop(self) -> None:
        self.running = False


def format_run_summary(summary: Dict) -> str:
    """Format a run summary for console output."""
    if not summary.get("success", False) and summary.get("message"):
        return f"❌ Daily run failed!\n📝 Error: {summary['message']}"

    status = "✅ Daily run completed successfully!" if summary.get("success") else \
        "⚠️ Daily run completed with errors"
    lines = [
        status,
        f"⏱️ Duration: {summary.get('duration_seconds', 0):.2f} seconds",
        f"🗓️ Festivals fetched: {summary.get('events_fetched', 0)}",
        "",
        "📈 Results Summary:",
        f"  • Guilds processed: {summary.get('guilds_processed', 0)}",
        f"  • Guilds skipped: {summary.get('guilds_skipped', 0)}",
        f"  • Messages sent: {summary.get('messages_sent', 0)}",
        f"  • Delivery failures: {summary.get('delivery_failures', 0)}",
        f"  • Errors encountered: {summary.get('errors_count', 0)}",
    ]
    if summary.get("message"):
        lines.insert(1, f"📝 {summary['message']}")
    return "\n".join(lines)
