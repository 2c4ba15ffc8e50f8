"""
FestWish Logging Configuration
=============================

Console and rotating-file logging for the bot. Component loggers carry
guild and festival context, which the JSON formatter lifts to top-level
fields so a day's deliveries can be grepped per guild.
"""

import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

# Attributes every LogRecord has; anything else arrived through ``extra``
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}

# Context keys promoted out of ``extra`` in JSON output
CONTEXT_KEYS = ("component", "guild_id", "festival")

# Libraries that are chatty at INFO
_NOISY_LOGGERS = ("discord", "discord.gateway", "discord.http", "aiohttp", "urllib3")


def _record_extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {k: v for k, v in vars(record).items() if k not in _RECORD_ATTRS}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, context, message."""

    def format(self, record: logging.LogRecord) -> str:
        extras = _record_extras(record)
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }
        for key in CONTEXT_KEYS:
            if key in extras:
                entry[key] = extras.pop(key)
        entry["message"] = record.getMessage()
        entry["source"] = f"{record.module}:{record.lineno}"

        if extras:
            entry["extra"] = extras
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


class ColoredConsoleFormatter(logging.Formatter):
    """Short colored lines for a terminal, tagged with guild/festival context."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, "")
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        tags = []
        guild_id = getattr(record, "guild_id", None)
        festival = getattr(record, "festival", None)
        if guild_id:
            tags.append(f"guild={guild_id}")
        if festival:
            tags.append(f"festival={festival}")
        tag_text = f" ({', '.join(tags)})" if tags else ""

        line = (
            f"{clock} {color}{record.levelname:<8}{self.RESET} "
            f"{record.name}{tag_text}: {record.getMessage()}"
        )
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logger(
    name: str = "festwish",
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    structured: bool = False,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console and/or rotating file handlers to a logger.

    Existing handlers are replaced, so calling this twice does not double
    every line. The file handler always writes JSON.

    Args:
        name: Logger name
        level: Logging level name
        log_file: Path to log file (optional)
        console: Whether to log to stdout
        structured: JSON instead of colored text on the console
        max_file_size: Rotate the log file after this many bytes
        backup_count: Rotated files to keep

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.upper())
    logger.handlers.clear()

    if console:
        stream = logging.StreamHandler(sys.stdout)
        stream.setFormatter(StructuredFormatter() if structured else ColoredConsoleFormatter())
        logger.addHandler(stream)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        rotating = logging.handlers.RotatingFileHandler(
            path, maxBytes=max_file_size, backupCount=backup_count, encoding="utf-8"
        )
        rotating.setFormatter(StructuredFormatter())
        logger.addHandler(rotating)

    return logger


class LoggerAdapter(logging.LoggerAdapter):
    """Adapter whose fixed context is merged under any per-call ``extra``."""

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger_for_component(
    component_name: str,
    guild_id: Optional[str] = None,
    festival: Optional[str] = None,
) -> LoggerAdapter:
    """Logger named ``festwish.<component>`` carrying its context.

    Args:
        component_name: Component name, e.g. 'scheduler' or 'wish_generator'
        guild_id: Discord guild the logger is bound to (optional)
        festival: Festival the logger is bound to (optional)
    """
    context: Dict[str, Any] = {"component": component_name}
    if guild_id:
        context["guild_id"] = guild_id
    if festival:
        context["festival"] = festival
    return LoggerAdapter(logging.getLogger(f"festwish.{component_name}"), context)


def configure_application_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = "logs/festwish.log",
    enable_console: bool = True,
    structured_logging: bool = False,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> None:
    """Configure the ``festwish`` logger tree and quiet library loggers."""
    setup_logger(
        name="festwish",
        level=log_level,
        log_file=log_file,
        console=enable_console,
        structured=structured_logging,
        max_file_size=max_file_size_mb * 1024 * 1024,
        backup_count=backup_count,
    )
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


class PerformanceLogger:
    """Times a block and logs how long it took, and whether it raised."""

    def __init__(self, logger: logging.Logger, operation: str, **context):
        self.logger = logger
        self.operation = operation
        self.context = context
        self.duration = 0.0
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        self.logger.debug(f"Starting {self.operation}", extra=self.context)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._started is None:
            return
        self.duration = time.perf_counter() - self._started
        extra = {**self.context, "duration_seconds": round(self.duration, 3), "success": exc_type is None}

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {self.duration:.3f}s", extra=extra)
        else:
            self.logger.error(f"Failed {self.operation} after {self.duration:.3f}s: {exc_val}", extra=extra)
