"""
Guild Settings Commands
======================

Slash commands that configure festival posting for a guild. Every reply is
ephemeral and a rejected command leaves the stored settings untouched.

Commands:
- /setwisheschannel - Channel that receives the daily wishes
- /setreligions - Festival categories to post
- /setmention - Mention placed above each wish
- /setmajor - Only post major festivals
- /setlanguage - Wish language
- /wishsettings - Show current settings
"""

import re
from typing import List, Optional

import discord

from ...config.settings import ScheduleSettings
from ...delivery.message_sender import is_text_capable
from ...models import Category, GuildSettings, MentionStyle, WishLanguage
from ...storage.settings_store import GuildSettingsStore
from ...utils.exceptions import ErrorCode, ValidationError, get_user_friendly_message, handle_exception
from ...utils.logging import get_logger_for_component

_LIST_SEPARATORS = re.compile(r"[\s,]+")

RELIGIONS_HINT = "Use any of: hindu, muslim, christian"
MENTION_HINT = "Choose: everyone | here | none"
LANGUAGE_HINT = "Choose: hinglish | english"
CHANNEL_HINT = "Please choose a text channel."
GUILD_ONLY_HINT = "This command only works inside a server."
GENERIC_FAILURE = "❌ Something went wrong."


def parse_religions(raw: Optional[str]) -> List[Category]:
    """Parse a comma/space separated category list.

    Unknown words are dropped and duplicates removed, keeping first-seen order.

    Raises:
        ValidationError: If no known category remains
    """
    parsed: List[Category] = []
    for word in _LIST_SEPARATORS.split((raw or "").lower()):
        if word in Category.values() and Category(word) not in parsed:
            parsed.append(Category(word))
    if not parsed:
        raise ValidationError(
            f"No known category in {raw!r}",
            field_name="list",
            error_code=ErrorCode.VALIDATION_INVALID_CHOICE,
            user_message=RELIGIONS_HINT,
        )
    return parsed


def parse_mention(raw: Optional[str]) -> MentionStyle:
    value = (raw or "").strip().lower()
    try:
        return MentionStyle(value)
    except ValueError:
        raise ValidationError(
            f"Invalid mention style {raw!r}",
            field_name="mention",
            error_code=ErrorCode.VALIDATION_INVALID_CHOICE,
            user_message=MENTION_HINT,
        ) from None


def parse_language(raw: Optional[str]) -> WishLanguage:
    value = (raw or "").strip().lower()
    try:
        return WishLanguage(value)
    except ValueError:
        raise ValidationError(
            f"Invalid language {raw!r}",
            field_name="language",
            error_code=ErrorCode.VALIDATION_INVALID_CHOICE,
            user_message=LANGUAGE_HINT,
        ) from None


def describe_settings(settings: GuildSettings) -> str:
    channel = f"<#{settings.channel_id}>" if settings.channel_id else "not set (announcements/general fallback)"
    return (
        "⚙️ **Festival wish settings**\n"
        f"• Channel: {channel}\n"
        f"• Religions: {', '.join(c.value for c in settings.religions)}\n"
        f"• Mention: {settings.mention.value}\n"
        f"• Major-only filter: {'ON' if settings.major_only else 'OFF'}\n"
        f"• Language: {settings.lang.value}"
    )


class SettingsCommandHandler:
    """Handler for the guild configuration slash commands."""

    def __init__(self, store: GuildSettingsStore, schedule: ScheduleSettings):
        """Initialize settings command handler.

        Args:
            store: Guild settings store
            schedule: Schedule settings, used to tell admins when wishes go out
        """
        self.store = store
        self.schedule = schedule
        self.logger = get_logger_for_component("settings_commands")

    async def handle_set_channel(self, interaction: discord.Interaction, channel) -> None:
        """Handle /setwisheschannel."""
        try:
            guild_id = await self._guild_id(interaction)
            if guild_id is None:
                return
            if not is_text_capable(channel):
                await self._reply(interaction, CHANNEL_HINT)
                return

            settings = self.store.get(guild_id)
            settings.channel_id = str(channel.id)
            self.store.set(guild_id, settings)

            self.logger.info(f"Guild {guild_id} wishes channel set to {channel.id}")
            await self._reply(
                interaction,
                f"✅ Will post in <#{channel.id}> daily at "
                f"**{self.schedule.daily_run_hour:02d}:{self.schedule.daily_run_minute:02d} "
                f"{self.schedule.timezone}**.",
            )
        except Exception as e:
            await self._handle_error(interaction, "set wishes channel", e)

    async def handle_set_religions(self, interaction: discord.Interaction, raw_list: str) -> None:
        """Handle /setreligions."""
        try:
            guild_id = await self._guild_id(interaction)
            if guild_id is None:
                return
            try:
                religions = parse_religions(raw_list)
            except ValidationError as e:
                await self._reply(interaction, get_user_friendly_message(e))
                return

            settings = self.store.get(guild_id)
            settings.religions = religions
            self.store.set(guild_id, settings)
            await self._reply(interaction, f"✅ Religions: {', '.join(r.value for r in religions)}")
        except Exception as e:
            await self._handle_error(interaction, "set religions", e)

    async def handle_set_mention(self, interaction: discord.Interaction, raw_mention: str) -> None:
        """Handle /setmention."""
        try:
            guild_id = await self._guild_id(interaction)
            if guild_id is None:
                return
            try:
                mention = parse_mention(raw_mention)
            except ValidationError as e:
                await self._reply(interaction, get_user_friendly_message(e))
                return

            settings = self.store.get(guild_id)
            settings.mention = mention
            self.store.set(guild_id, settings)
            await self._reply(interaction, f"✅ Mention: {mention.value}")
        except Exception as e:
            await self._handle_error(interaction, "set mention", e)

    async def handle_set_major(self, interaction: discord.Interaction, major_only: bool) -> None:
        """Handle /setmajor."""
        try:
            guild_id = await self._guild_id(interaction)
            if guild_id is None:
                return

            settings = self.store.get(guild_id)
            settings.major_only = bool(major_only)
            self.store.set(guild_id, settings)
            await self._reply(
                interaction, f"✅ Major-only filter: {'ON' if settings.major_only else 'OFF'}"
            )
        except Exception as e:
            await self._handle_error(interaction, "set major-only", e)

    async def handle_set_language(self, interaction: discord.Interaction, raw_language: str) -> None:
        """Handle /setlanguage."""
        try:
            guild_id = await self._guild_id(interaction)
            if guild_id is None:
                return
            try:
                language = parse_language(raw_language)
            except ValidationError as e:
                await self._reply(interaction, get_user_friendly_message(e))
                return

            settings = self.store.get(guild_id)
            settings.lang = language
            self.store.set(guild_id, settings)
            await self._reply(interaction, f"✅ Language: {language.value}")
        except Exception as e:
            await self._handle_error(interaction, "set language", e)

    async def handle_show_settings(self, interaction: discord.Interaction) -> None:
        """Handle /wishsettings."""
        try:
            guild_id = await self._guild_id(interaction)
            if guild_id is None:
                return
            await self._reply(interaction, describe_settings(self.store.get(guild_id)))
        except Exception as e:
            await self._handle_error(interaction, "show settings", e)

    async def _guild_id(self, interaction: discord.Interaction) -> Optional[str]:
        if interaction.guild_id is None:
            await self._reply(interaction, GUILD_ONLY_HINT)
            return None
        return str(interaction.guild_id)

    async def _reply(self, interaction: discord.Interaction, content: str) -> None:
        if interaction.response.is_done():
            await interaction.followup.send(content, ephemeral=True)
        else:
            await interaction.response.send_message(content, ephemeral=True)

    async def _handle_error(self, interaction: discord.Interaction, operation: str,
                            error: Exception) -> None:
        handle_exception(
            error, self.logger, operation,
            context={"guild_id": str(interaction.guild_id) if interaction.guild_id else None},
        )
        try:
            await self._reply(interaction, GENERIC_FAILURE)
        except discord.HTTPException as e:
            self.logger.warning(f"Could not send error reply for {operation}: {e}")
