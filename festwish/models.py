"""
FestWish Data Models
===================

Pydantic models and dataclasses shared across the pipeline: festival
records from the event provider, per-guild settings, provider results and
the notification payload handed to Discord.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import discord
from pydantic import BaseModel, Field, field_validator


class Category(str, Enum):
    """Fixed festival category vocabulary."""
    HINDU = "hindu"
    MUSLIM = "muslim"
    CHRISTIAN = "christian"

    @classmethod
    def values(cls) -> List[str]:
        return [c.value for c in cls]


class MentionStyle(str, Enum):
    """Mention prepended to each wish."""
    EVERYONE = "everyone"
    HERE = "here"
    NONE = "none"

    @property
    def prefix(self) -> str:
        if self is MentionStyle.NONE:
            return ""
        return f"@{self.value}"


class WishLanguage(str, Enum):
    """Language the wish text is written in."""
    HINGLISH = "hinglish"
    ENGLISH = "english"


class EventRecord(BaseModel):
    """A single holiday returned by the event provider."""
    name: str = Field(..., description="Holiday name")
    description: str = Field(default="", description="Provider description")
    type_tags: Tuple[str, ...] = Field(default_factory=tuple, description="Provider type list")
    primary_type: str = Field(default="", description="Provider primary type")

    model_config = {"frozen": True}

    @classmethod
    def from_provider(cls, raw: Dict[str, Any]) -> "EventRecord":
        """Normalize a raw provider holiday object."""
        return cls(
            name=str(raw.get("name") or ""),
            description=str(raw.get("description") or ""),
            type_tags=tuple(str(t) for t in (raw.get("type") or [])),
            primary_type=str(raw.get("primary_type") or ""),
        )

    def __str__(self) -> str:
        return f"EventRecord({self.name})"


class GuildSettings(BaseModel):
    """Per-guild delivery preferences.

    Serialized with the camelCase keys used by ``guildConfigs.json``.
    """
    channel_id: Optional[str] = Field(default=None, alias="channelId", description="Target channel ID")
    religions: List[Category] = Field(
        default_factory=lambda: list(Category), description="Enabled festival categories"
    )
    mention: MentionStyle = Field(default=MentionStyle.EVERYONE, description="Mention style")
    major_only: bool = Field(default=True, alias="majorOnly", description="Only post major festivals")
    lang: WishLanguage = Field(default=WishLanguage.HINGLISH, description="Wish language")

    model_config = {"populate_by_name": True}

    @field_validator('channel_id', mode='before')
    @classmethod
    def stringify_channel_id(cls, v):
        if v is None or v == "":
            return None
        return str(v)

    @field_validator('religions', mode='before')
    @classmethod
    def restrict_to_vocabulary(cls, v):
        """Keep only known categories, lower-cased and deduplicated in order."""
        if not isinstance(v, (list, tuple, set)):
            raise ValueError("religions must be a list")
        allowed = set(Category.values())
        cleaned = []
        for item in v:
            value = item.value if isinstance(item, Category) else str(item).strip().lower()
            if value in allowed and value not in cleaned:
                cleaned.append(value)
        return cleaned

    def to_storage(self) -> Dict[str, Any]:
        """Dictionary written to the settings file."""
        return self.model_dump(mode="json", by_alias=True)


class FetchStatus(str, Enum):
    """Outcome of an external provider call."""
    OK = "ok"
    EMPTY = "empty"
    ERROR = "error"


@dataclass
class EventFetchResult:
    """Result of an event provider query."""
    status: FetchStatus
    events: List[EventRecord] = field(default_factory=list)
    error: Optional[str] = None
    fetch_time: Optional[datetime] = None

    def __post_init__(self):
        if not self.fetch_time:
            self.fetch_time = datetime.now(timezone.utc)

    @property
    def success(self) -> bool:
        return self.status != FetchStatus.ERROR


@dataclass
class ImageResult:
    """Result of an image search."""
    status: FetchStatus
    url: str = ""
    query: Optional[str] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == FetchStatus.OK and bool(self.url)


@dataclass
class NotificationPayload:
    """Formatted festival wish, ready to hand to Discord."""
    title: str
    description: str
    color: int
    footer: str
    image_url: Optional[str] = None
    mention: str = ""

    def to_embed(self) -> discord.Embed:
        embed = discord.Embed(
            title=self.title,
            description=self.description,
            color=self.color,
        )
        embed.set_footer(text=self.footer)
        if self.image_url:
            embed.set_image(url=self.image_url)
        return embed

    def to_send_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for ``Messageable.send``."""
        kwargs: Dict[str, Any] = {"embed": self.to_embed()}
        if self.mention:
            kwargs["content"] = self.mention
            kwargs["allowed_mentions"] = discord.AllowedMentions(everyone=True)
        return kwargs
