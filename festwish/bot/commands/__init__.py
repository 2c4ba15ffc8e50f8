"""Slash command handlers."""

from .settings_commands import (
    SettingsCommandHandler,
    parse_religions,
    parse_mention,
    parse_language,
    describe_settings,
)

__all__ = [
    'SettingsCommandHandler',
    'parse_religions',
    'parse_mention',
    'parse_language',
    'describe_settings',
]
