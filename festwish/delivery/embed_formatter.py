"""
Festival Embed Formatting
========================

Turns a festival wish into the embed payload posted to Discord.
"""

from datetime import datetime
from typing import Dict, Optional

from ..models import Category, NotificationPayload

CATEGORY_COLORS: Dict[Optional[Category], int] = {
    Category.HINDU: 0xF59E0B,      # amber
    Category.MUSLIM: 0x10B981,     # emerald
    Category.CHRISTIAN: 0x60A5FA,  # blue
}
DEFAULT_COLOR = 0xA78BFA  # violet


def color_for(category: Optional[Category]) -> int:
    return CATEGORY_COLORS.get(category, DEFAULT_COLOR)


def format_footer(now: datetime) -> str:
    """Footer line, e.g. ``Auto-generated • Monday, 20 Oct 2025 • IST``."""
    zone = now.tzname() or "UTC"
    return f"Auto-generated • {now.strftime('%A, %d %b %Y')} • {zone}"


def build_notification(
    event_name: str,
    category: Optional[Category],
    wish_text: str,
    image_url: Optional[str],
    now: datetime,
    mention: str = "",
) -> NotificationPayload:
    """Build the notification payload for one festival.

    Args:
        event_name: Festival name used in the title
        category: Festival category, selects the embed color
        wish_text: Embed body
        image_url: Banner image; omitted when empty
        now: Current zone-aware time for the footer
        mention: Message content placed above the embed

    Returns:
        NotificationPayload ready for ``MessageSender``
    """
    return NotificationPayload(
        title=f"{event_name} — Wishes",
        description=wish_text,
        color=color_for(category),
        footer=format_footer(now),
        image_url=image_url or None,
        mention=mention,
    )
