"""
FestWish Configuration System
============================

Configuration management with environment variables and Pydantic models.
Environment variables (prefix ``FESTWISH_``, nested with ``__``) override
Field defaults.
"""

from pathlib import Path
from typing import List, Optional
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings

from ..utils.exceptions import ConfigurationError, ErrorCode


class ImageProviderName(str, Enum):
    """Available image providers."""
    PEXELS = "pexels"
    NONE = "none"


class LogLevel(str, Enum):
    """Available log levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class DiscordSettings(BaseModel):
    """Discord bot configuration."""
    bot_token: str = Field(..., description="Discord bot token")
    fallback_channel_names: List[str] = Field(
        default_factory=lambda: ["announcements", "general"],
        description="Channel names tried when a guild has no configured channel",
    )

    @field_validator('bot_token')
    @classmethod
    def validate_bot_token(cls, v):
        """Validate bot token presence."""
        if not v or not isinstance(v, str) or not v.strip():
            raise ValueError("Bot token is required")
        return v.strip()


class ProvidersSettings(BaseModel):
    """External API providers configuration."""
    calendarific_api_key: Optional[str] = Field(default=None, description="Calendarific API key")
    gemini_api_key: Optional[str] = Field(default=None, description="Google Gemini API key")
    gemini_model: str = Field(default="gemini-2.5-flash", description="Gemini model for wish text")
    pexels_api_key: Optional[str] = Field(default=None, description="Pexels API key")
    image_provider: ImageProviderName = Field(default=ImageProviderName.PEXELS, description="Image search provider")

    temperature: float = Field(default=0.9, ge=0.0, le=2.0, description="AI temperature setting")
    max_tokens: int = Field(default=400, ge=50, le=2000, description="Maximum tokens per response")

    @field_validator('image_provider', mode='before')
    @classmethod
    def normalize_image_provider(cls, v):
        """Accept provider names case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class ScheduleSettings(BaseModel):
    """Daily run schedule configuration."""
    timezone: str = Field(default="Asia/Kolkata", description="Timezone that defines 'today'")
    country: str = Field(default="IN", min_length=2, max_length=2, description="ISO country code for holidays")
    daily_run_hour: int = Field(default=1, ge=0, le=23, description="Local hour of the daily run (0-23)")
    daily_run_minute: int = Field(default=0, ge=0, le=59, description="Local minute of the daily run")
    preview_on_startup: bool = Field(default=True, description="Log a non-sending preview pass at startup")

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v):
        """Ensure the timezone is a known IANA zone."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone: {v}")
        return v

    @field_validator('country')
    @classmethod
    def upper_country(cls, v):
        return v.upper()


class StorageSettings(BaseModel):
    """JSON file stores."""
    settings_path: str = Field(default="guildConfigs.json", description="Per-guild settings file")
    cache_path: str = Field(default="wishCache.json", description="Generated wish/image cache file")
    cache_retention_days: int = Field(default=7, ge=0, le=365, description="Days to keep cache entries (0 keeps forever)")
    pin_fallbacks: bool = Field(
        default=False,
        description="Keep returning a cached fallback wish instead of retrying the AI provider",
    )


class LimitsSettings(BaseModel):
    """Request and quality limits."""
    request_timeout: int = Field(default=20, ge=1, le=300, description="Event provider request timeout in seconds")
    min_wish_length: int = Field(default=220, ge=1, le=2000, description="Shortest AI wish accepted")
    image_candidates: int = Field(default=10, ge=1, le=80, description="Photos requested per image search")


class LoggingSettings(BaseModel):
    """Logging configuration."""
    level: LogLevel = Field(default=LogLevel.INFO, description="Global log level")
    file_path: Optional[str] = Field(default="logs/festwish.log", description="Log file path")
    max_file_size_mb: int = Field(default=10, ge=1, le=100, description="Max log file size in MB")
    backup_count: int = Field(default=5, ge=1, le=20, description="Number of log backup files")
    structured_logging: bool = Field(default=False, description="Use structured JSON logging")
    console_logging: bool = Field(default=True, description="Enable console logging")


class FestWishSettings(BaseSettings):
    """Main application settings."""

    discord: DiscordSettings
    providers: ProvidersSettings = Field(default_factory=ProvidersSettings)
    schedule: ScheduleSettings = Field(default_factory=ScheduleSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    app_name: str = Field(default="FestWish", description="Application name")
    debug: bool = Field(default=False, description="Enable debug mode")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "env_nested_delimiter": "__",
        "env_prefix": "FESTWISH_",
        "extra": "ignore",
    }

    @property
    def tz(self) -> ZoneInfo:
        """Configured timezone object."""
        return ZoneInfo(self.schedule.timezone)

    def validate_configuration(self) -> None:
        """Validate complete configuration."""
        errors = []

        for label, raw_path in (
            ("settings", self.storage.settings_path),
            ("cache", self.storage.cache_path),
            ("log", self.logging.file_path),
        ):
            if not raw_path:
                continue
            try:
                Path(raw_path).parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                errors.append(f"Invalid {label} path: {e}")

        if errors:
            raise ConfigurationError(
                f"Configuration validation failed: {'; '.join(errors)}",
                error_code=ErrorCode.CONFIG_INVALID
            )

    def missing_provider_keys(self) -> List[str]:
        """Names of provider keys that are not configured."""
        missing = []
        if not self.providers.calendarific_api_key:
            missing.append("calendarific_api_key")
        if not self.providers.gemini_api_key:
            missing.append("gemini_api_key")
        if self.providers.image_provider == ImageProviderName.PEXELS and not self.providers.pexels_api_key:
            missing.append("pexels_api_key")
        return missing

    def get_effective_log_level(self) -> str:
        """Get effective log level considering debug mode."""
        if self.debug:
            return "DEBUG"
        return self.logging.level.value


def load_settings() -> FestWishSettings:
    """Load settings from environment variables, ``.env`` and defaults.

    Returns:
        Loaded and validated settings

    Raises:
        ConfigurationError: If configuration is invalid
    """
    from dotenv import load_dotenv
    load_dotenv()

    try:
        settings = FestWishSettings()
        settings.validate_configuration()
        return settings

    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to initialize settings: {e}",
            error_code=ErrorCode.CONFIG_INVALID
        )


# Global settings instance
_settings: Optional[FestWishSettings] = None


def get_settings(reload: bool = False) -> FestWishSettings:
    """Get global settings instance (singleton pattern).

    Args:
        reload: Force reload of settings

    Returns:
        Global settings instance
    """
    global _settings

    if _settings is None or reload:
        _settings = load_settings()

    return _settings
