"""
FestWish Discord Bot
===================

Discord client for FestWish.

Handles:
- Slash command registration and routing
- Starting the daily festival service once connected
- Optional preview pass at startup
- One-shot daily runs for cron-style invocation
"""

import asyncio
from typing import List, Optional, Union

import discord
from discord import app_commands

from ..config.settings import FestWishSettings, get_settings
from ..scheduler.daily_scheduler import DailyScheduler, format_run_summary
from ..utils.logging import get_logger_for_component
from .commands.settings_commands import SettingsCommandHandler


def build_commands(handler: SettingsCommandHandler) -> List[app_commands.Command]:
    """Slash commands bound to a settings handler."""

    @app_commands.command(
        name="setwisheschannel",
        description="Select the channel where daily festival wishes should be posted",
    )
    @app_commands.describe(channel="Target text channel or thread")
    async def set_wishes_channel(
        interaction: discord.Interaction, channel: Union[discord.TextChannel, discord.Thread]
    ):
        await handler.handle_set_channel(interaction, channel)

    @app_commands.command(
        name="setreligions",
        description="Restrict posts to religions (comma-separated)",
    )
    @app_commands.rename(religions="list")
    @app_commands.describe(religions="hindu,muslim,christian")
    async def set_religions(interaction: discord.Interaction, religions: str):
        await handler.handle_set_religions(interaction, religions)

    @app_commands.command(name="setmention", description="Mention style to prepend to the post")
    @app_commands.describe(mention="everyone | here | none")
    async def set_mention(interaction: discord.Interaction, mention: str):
        await handler.handle_set_mention(interaction, mention)

    @app_commands.command(name="setmajor", description="Toggle major-festivals-only filter")
    @app_commands.describe(major_only="true = only major festivals; false = include all")
    async def set_major(interaction: discord.Interaction, major_only: bool):
        await handler.handle_set_major(interaction, major_only)

    @app_commands.command(name="setlanguage", description="Language used for festival wishes")
    @app_commands.describe(language="hinglish | english")
    async def set_language(interaction: discord.Interaction, language: str):
        await handler.handle_set_language(interaction, language)

    @app_commands.command(name="wishsettings", description="Show this server's festival wish settings")
    async def wish_settings(interaction: discord.Interaction):
        await handler.handle_show_settings(interaction)

    return [set_wishes_channel, set_religions, set_mention, set_major, set_language, wish_settings]


class FestWishBot(discord.Client):
    """Discord client that posts daily festival wishes."""

    def __init__(
        self,
        settings: Optional[FestWishSettings] = None,
        scheduler: Optional[DailyScheduler] = None,
        run_once: bool = False,
        preview: bool = False,
        sync_only: bool = False,
    ):
        """Initialize the bot.

        Args:
            settings: Application settings
            scheduler: Daily scheduler (built from settings if omitted)
            run_once: Run a single daily pass after login, then close
            preview: With run_once, make the pass a preview
            sync_only: Register slash commands globally, then close
        """
        intents = discord.Intents.none()
        intents.guilds = True
        super().__init__(intents=intents)

        self.settings = settings or get_settings()
        self.logger = get_logger_for_component("discord_bot")
        self.scheduler = scheduler or DailyScheduler(self.settings)
        self.command_handler = SettingsCommandHandler(
            self.scheduler.settings_store, self.settings.schedule
        )
        self.tree = app_commands.CommandTree(self)

        self.run_once = run_once
        self.preview = preview
        self.sync_only = sync_only
        self.last_summary: Optional[dict] = None
        self._service_task: Optional[asyncio.Task] = None

    async def setup_hook(self) -> None:
        self.scheduler.settings_store.load()
        self.scheduler.cache.load()

        for command in build_commands(self.command_handler):
            self.tree.add_command(command)
        self.logger.info(f"Registered {len(self.tree.get_commands())} slash commands")

    async def sync_commands(self) -> int:
        """Register the slash commands globally with Discord."""
        synced = await self.tree.sync()
        self.logger.info(f"Synced {len(synced)} slash commands globally")
        return len(synced)

    async def on_ready(self) -> None:
        self.logger.info(f"Logged in as {self.user} in {len(self.guilds)} guilds")

        if self.sync_only:
            try:
                await self.sync_commands()
            finally:
                await self.close()
            return

        if self.run_once:
            try:
                self.last_summary = await self.scheduler.run_daily(list(self.guilds), preview=self.preview)
                self.logger.info(format_run_summary(self.last_summary))
            finally:
                await self.close()
            return

        if self._service_task is None:
            self._service_task = asyncio.create_task(
                self.scheduler.run_service(lambda: list(self.guilds))
            )
            if self.settings.schedule.preview_on_startup:
                await self.scheduler.run_daily(list(self.guilds), preview=True)

    async def close(self) -> None:
        if self._service_task is not None and not self._service_task.done():
            self.scheduler.stop()
            self._service_task.cancel()
        await super().close()

    def run_bot(self) -> None:
        """Run the bot until interrupted."""
        self.run(self.settings.discord.bot_token, log_handler=None)
