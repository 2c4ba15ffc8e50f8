#!/usr/bin/env python3
"""
FestWish - Festival Wishes for Discord
======================================

Main application entry point with CLI interface for management and testing.

Usage:
    python main.py --help                    # Show all commands
    python main.py check-config              # Validate configuration
    python main.py run-bot                   # Start the Discord bot service
    python main.py daily-run [--preview]     # Run one daily pass and exit
    python main.py register-commands         # Register slash commands globally
    python main.py show-events [--date D]    # List festivals for a date
    python main.py test-ai [--festival F]    # Test the text provider
    python main.py cache-stats               # Show generation cache contents
    python main.py prune-cache               # Drop expired cache entries
"""

import sys
import asyncio
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from festwish.ai.wish_generator import build_wish_prompt, create_text_provider
from festwish.config.settings import get_settings
from festwish.models import WishLanguage
from festwish.processing.classifier import classify, is_major
from festwish.scheduler.daily_scheduler import format_run_summary
from festwish.sources.calendarific_client import CalendarificClient
from festwish.storage.generation_cache import GenerationCache
from festwish.utils.logging import configure_application_logging
from festwish.utils.exceptions import FestWishError

console = Console()


def _setup_logging(settings, debug: bool) -> None:
    configure_application_logging(
        log_level="DEBUG" if debug else settings.get_effective_log_level(),
        log_file=settings.logging.file_path,
        enable_console=settings.logging.console_logging,
        structured_logging=settings.logging.structured_logging,
        max_file_size_mb=settings.logging.max_file_size_mb,
        backup_count=settings.logging.backup_count,
    )


@click.group(invoke_without_command=True)
@click.option('--debug', is_flag=True, help='Enable debug mode')
@click.pass_context
def cli(ctx, debug):
    """FestWish - daily festival wishes for Discord servers."""
    ctx.ensure_object(dict)
    ctx.obj['debug'] = debug

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
def check_config():
    """Validate configuration and environment variables."""
    console.print("[bold blue]🔧 Checking FestWish Configuration[/bold blue]")

    try:
        settings = get_settings()

        table = Table(title="Configuration Status")
        table.add_column("Component", style="cyan")
        table.add_column("Status", style="green")
        table.add_column("Details")

        checks = [
            ("Discord Bot", _check_discord_config),
            ("Event Source", _check_event_source_config),
            ("Text Generation", _check_text_config),
            ("Images", _check_image_config),
            ("Schedule", _check_schedule_config),
            ("Storage", _check_storage_config),
            ("Logging", _check_logging_config),
        ]

        all_passed = True
        for name, check_func in checks:
            status, details = check_func(settings)
            table.add_row(name, "✅ Valid" if status else "❌ Invalid", details)
            if not status:
                all_passed = False

        console.print(table)

        if all_passed:
            console.print("[bold green]✅ All configuration checks passed![/bold green]")
            sys.exit(0)
        else:
            console.print("[bold red]❌ Configuration validation failed[/bold red]")
            sys.exit(1)

    except FestWishError as e:
        console.print(f"[bold red]❌ Configuration error: {e}[/bold red]")
        sys.exit(1)


@cli.command()
@click.pass_context
def run_bot(ctx):
    """Start the Discord bot and the daily festival service."""
    from festwish.bot.discord_bot import FestWishBot

    settings = get_settings()
    _setup_logging(settings, ctx.obj.get('debug'))

    schedule = settings.schedule
    console.print("[bold blue]🤖 Starting FestWish bot[/bold blue]")
    console.print(
        f"📅 Daily wishes at {schedule.daily_run_hour:02d}:{schedule.daily_run_minute:02d} "
        f"{schedule.timezone}. Press Ctrl+C to stop."
    )
    FestWishBot(settings).run_bot()


@cli.command()
@click.option('--preview', is_flag=True, help='Only log what would be posted')
@click.pass_context
def daily_run(ctx, preview):
    """Log in, run one daily pass, print the summary and exit."""
    from festwish.bot.discord_bot import FestWishBot

    settings = get_settings()
    _setup_logging(settings, ctx.obj.get('debug'))

    console.print(f"[bold blue]🔄 Running daily pass{' (preview)' if preview else ''}...[/bold blue]")
    bot = FestWishBot(settings, run_once=True, preview=preview)
    bot.run_bot()

    if bot.last_summary is None:
        console.print("[bold red]❌ Daily pass did not run[/bold red]")
        sys.exit(1)

    console.print(format_run_summary(bot.last_summary))
    sys.exit(0 if bot.last_summary.get("success") else 1)


@cli.command()
@click.pass_context
def register_commands(ctx):
    """Register the slash commands globally with Discord."""
    from festwish.bot.discord_bot import FestWishBot

    settings = get_settings()
    _setup_logging(settings, ctx.obj.get('debug'))

    FestWishBot(settings, sync_only=True).run_bot()
    console.print("[bold green]✅ Slash commands registered globally.[/bold green]")


@cli.command()
@click.option('--date', 'date_str', help='Date to look up (YYYY-MM-DD, default: today)')
def show_events(date_str):
    """List the holidays for a date and how they are classified."""
    settings = get_settings()

    try:
        day = date.fromisoformat(date_str) if date_str else datetime.now(settings.tz).date()
    except ValueError:
        console.print(f"[bold red]❌ Invalid date: {date_str}[/bold red]")
        sys.exit(1)

    client = CalendarificClient(
        settings.providers.calendarific_api_key,
        country=settings.schedule.country,
        timeout=settings.limits.request_timeout,
    )
    result = asyncio.run(client.fetch_holidays(day.year, day.month, day.day))

    if not result.success:
        console.print(f"[bold red]❌ Festival lookup failed: {result.error}[/bold red]")
        sys.exit(1)
    if not result.events:
        console.print(f"[yellow]No holidays listed for {day.isoformat()}[/yellow]")
        return

    table = Table(title=f"Holidays on {day.isoformat()} ({settings.schedule.country})")
    table.add_column("Name", style="cyan")
    table.add_column("Category")
    table.add_column("Major")
    table.add_column("Type")

    for event in result.events:
        category = classify(event.name)
        table.add_row(
            event.name,
            category.value if category else "-",
            "✅" if is_major(event) else "",
            event.primary_type or ", ".join(event.type_tags),
        )
    console.print(table)


@cli.command()
@click.option('--festival', default='Diwali', help='Festival to write a sample wish for')
@click.option('--language', type=click.Choice([l.value for l in WishLanguage]), default='hinglish')
def test_ai(festival, language):
    """Test the text provider and print one sample wish."""
    settings = get_settings()
    provider = create_text_provider(settings)
    if provider is None:
        console.print("[yellow]Gemini API key not set; wishes will use templates[/yellow]")
        sys.exit(1)

    async def _run():
        if not await provider.test_connection():
            return None
        prompt = build_wish_prompt(festival, classify(festival), WishLanguage(language))
        return await provider.generate_text(prompt)

    console.print(f"[bold blue]🧪 Testing {provider.model_name}...[/bold blue]")
    result = asyncio.run(_run())
    if result is None:
        console.print("[bold red]❌ Connection test failed[/bold red]")
        sys.exit(1)
    if not result.success:
        console.print(f"[bold red]❌ Generation failed: {result.error_message}[/bold red]")
        sys.exit(1)

    console.print(result.text)
    console.print(f"[green]✅ {result.char_count} characters in {result.processing_time_ms}ms[/green]")


@cli.command()
def cache_stats():
    """Show generation cache entry counts by kind."""
    settings = get_settings()
    cache = GenerationCache(settings.storage.cache_path, settings.storage.cache_retention_days)
    stats = cache.stats()

    table = Table(title=f"Generation cache ({settings.storage.cache_path})")
    table.add_column("Kind", style="cyan")
    table.add_column("Entries", justify="right")
    for kind, count in sorted(stats.items()):
        if kind != "total":
            table.add_row(kind, str(count))
    table.add_row("[bold]total[/bold]", f"[bold]{stats['total']}[/bold]")
    console.print(table)


@cli.command()
@click.option('--days', type=int, help='Retention window in days (default: configured)')
def prune_cache(days: Optional[int]):
    """Drop generation cache entries older than the retention window."""
    settings = get_settings()
    retention = settings.storage.cache_retention_days if days is None else days
    cache = GenerationCache(settings.storage.cache_path, retention)

    try:
        removed = cache.prune(datetime.now(settings.tz).date())
    except FestWishError as e:
        console.print(f"[bold red]❌ Pruning failed: {e}[/bold red]")
        sys.exit(1)
    console.print(f"[green]🧹 Removed {removed} cache entries (retention {retention} days)[/green]")


# Helper functions for configuration checks
def _check_discord_config(settings) -> tuple[bool, str]:
    token = settings.discord.bot_token
    if not token or token.startswith("${"):
        return False, "Bot token not set"
    return True, f"Fallback channels: {', '.join(settings.discord.fallback_channel_names)}"


def _check_event_source_config(settings) -> tuple[bool, str]:
    if not settings.providers.calendarific_api_key:
        return False, "Calendarific API key not set"
    return True, f"Country: {settings.schedule.country}"


def _check_text_config(settings) -> tuple[bool, str]:
    if not settings.providers.gemini_api_key:
        return True, "Gemini key not set; templated wishes only"
    return True, f"Model: {settings.providers.gemini_model}"


def _check_image_config(settings) -> tuple[bool, str]:
    provider = settings.providers.image_provider.value
    if provider == "pexels" and not settings.providers.pexels_api_key:
        return True, "Pexels key not set; embeds without images"
    return True, f"Provider: {provider}"


def _check_schedule_config(settings) -> tuple[bool, str]:
    schedule = settings.schedule
    return True, (
        f"{schedule.daily_run_hour:02d}:{schedule.daily_run_minute:02d} {schedule.timezone}, "
        f"preview on startup: {schedule.preview_on_startup}"
    )


def _check_storage_config(settings) -> tuple[bool, str]:
    try:
        for raw_path in (settings.storage.settings_path, settings.storage.cache_path):
            Path(raw_path).parent.mkdir(parents=True, exist_ok=True)
        return True, (
            f"Settings: {settings.storage.settings_path}, Cache: {settings.storage.cache_path} "
            f"({settings.storage.cache_retention_days}d)"
        )
    except OSError as e:
        return False, str(e)


def _check_logging_config(settings) -> tuple[bool, str]:
    try:
        if settings.logging.file_path:
            Path(settings.logging.file_path).parent.mkdir(parents=True, exist_ok=True)
        return True, f"Level: {settings.logging.level.value}, Console: {settings.logging.console_logging}"
    except OSError as e:
        return False, str(e)


if __name__ == "__main__":
    try:
        cli()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 FestWish interrupted by user[/yellow]")
        sys.exit(130)
    except Exception as e:
        console.print(f"\n[bold red]❌ Unexpected error: {e}[/bold red]")
        sys.exit(1)
