"""
FestWish Discord Bot Module
==========================

Discord client and slash command handlers.
"""

from .discord_bot import FestWishBot, build_commands

__all__ = ['FestWishBot', 'build_commands']
