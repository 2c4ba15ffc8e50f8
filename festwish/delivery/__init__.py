"""
FestWish Delivery Module
=======================

Embed formatting and Discord message delivery.
"""

from .embed_formatter import CATEGORY_COLORS, DEFAULT_COLOR, build_notification, format_footer
from .message_sender import MessageSender, DeliveryResult, TEXT_CAPABLE, is_text_capable

__all__ = [
    'CATEGORY_COLORS',
    'DEFAULT_COLOR',
    'build_notification',
    'format_footer',
    'MessageSender',
    'DeliveryResult',
    'TEXT_CAPABLE',
    'is_text_capable',
]
