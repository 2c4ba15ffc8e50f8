#!/usr/bin/env python3
"""
FestWish Bot Runner
==================

Main entry point for running the FestWish Discord bot service.
Handles initialization, startup, and graceful shutdown.
"""

import sys
import logging

from festwish.bot.discord_bot import FestWishBot
from festwish.config.settings import get_settings
from festwish.utils.exceptions import FestWishError
from festwish.utils.logging import configure_application_logging


def main():
    """Main entry point for the bot service."""
    try:
        settings = get_settings()
    except FestWishError as e:
        print(f"❌ Configuration error: {e}")
        sys.exit(1)

    configure_application_logging(
        log_level=settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
    )

    logger = logging.getLogger('festwish.bot_runner')
    logger.info("Starting FestWish Discord Bot...")

    missing = settings.missing_provider_keys()
    if missing:
        logger.warning(f"Running without: {', '.join(missing)}")

    try:
        print("🤖 FestWish Bot is running! Press Ctrl+C to stop.")
        FestWishBot(settings).run_bot()
    except KeyboardInterrupt:
        print("👋 Bot stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}")
        print(f"❌ Failed to start bot: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
