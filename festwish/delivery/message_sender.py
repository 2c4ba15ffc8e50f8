"""
Message Delivery
===============

Resolves the target channel for a guild and posts festival embeds to it.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

import discord

from ..models import NotificationPayload
from ..utils.exceptions import DeliveryError, ErrorCode
from ..utils.logging import get_logger_for_component

TEXT_CAPABLE = frozenset({
    discord.ChannelType.text,
    discord.ChannelType.news,
    discord.ChannelType.public_thread,
    discord.ChannelType.private_thread,
    discord.ChannelType.news_thread,
})


def is_text_capable(channel) -> bool:
    """Whether a channel can receive the bot's embeds."""
    return channel is not None and getattr(channel, "type", None) in TEXT_CAPABLE


@dataclass
class DeliveryResult:
    """Result of a single embed delivery."""
    guild_id: str
    channel_id: Optional[str]
    success: bool
    error: Optional[str] = None
    delivery_time: Optional[datetime] = None

    def __post_init__(self):
        if not self.delivery_time:
            self.delivery_time = datetime.now(timezone.utc)


class MessageSender:
    """Posts notification payloads to guild channels."""

    def __init__(self, fallback_names: Sequence[str] = ("announcements", "general")):
        """Initialize message sender.

        Args:
            fallback_names: Channel names tried, in order, when a guild has no
                usable configured channel
        """
        self.fallback_names = tuple(name.lower() for name in fallback_names)
        self.logger = get_logger_for_component('message_sender')

    async def resolve_channel(self, guild: discord.Guild, channel_id: Optional[str]):
        """Configured channel if usable, else the first fallback by name, else None."""
        if channel_id:
            channel = await self._lookup_channel(guild, channel_id)
            if is_text_capable(channel):
                return channel
            self.logger.info(
                f"Configured channel {channel_id} unusable in guild {guild.id}; trying fallbacks"
            )

        return self._find_fallback(guild.channels)

    async def _lookup_channel(self, guild: discord.Guild, channel_id: str):
        try:
            snowflake = int(channel_id)
        except (TypeError, ValueError):
            self.logger.warning(f"Invalid channel id {channel_id!r} for guild {guild.id}")
            return None

        channel = guild.get_channel_or_thread(snowflake)
        if channel is not None:
            return channel

        try:
            return await guild.fetch_channel(snowflake)
        except discord.NotFound:
            self.logger.info(f"Channel {channel_id} no longer exists in guild {guild.id}")
        except discord.HTTPException as e:
            self.logger.warning(f"Could not fetch channel {channel_id} in guild {guild.id}: {e}")
        return None

    def _find_fallback(self, channels: Iterable):
        by_name = {}
        for channel in channels:
            if is_text_capable(channel):
                by_name.setdefault(channel.name.lower(), channel)
        for name in self.fallback_names:
            if name in by_name:
                return by_name[name]
        return None

    async def send_notification(
        self, channel, payload: NotificationPayload, guild_id: str = ""
    ) -> DeliveryResult:
        """Send one embed; Discord HTTP errors are logged and reported, not raised."""
        channel_id = str(getattr(channel, "id", "")) or None
        try:
            await channel.send(**payload.to_send_kwargs())
        except discord.HTTPException as e:
            if isinstance(e, discord.Forbidden):
                error = DeliveryError(
                    f"Missing permission to post '{payload.title}': {e}",
                    guild_id=guild_id, channel_id=channel_id,
                    error_code=ErrorCode.DELIVERY_PERMISSION_DENIED,
                )
            else:
                error = DeliveryError(
                    f"Failed to post '{payload.title}': {e}",
                    guild_id=guild_id, channel_id=channel_id,
                )
            self.logger.error(str(error), extra=error.to_dict())
            return DeliveryResult(guild_id=guild_id, channel_id=channel_id, success=False, error=str(error))

        self.logger.info(f"Posted '{payload.title}' to channel {channel_id} (guild {guild_id})")
        return DeliveryResult(guild_id=guild_id, channel_id=channel_id, success=True)
