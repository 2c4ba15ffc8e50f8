"""
FestWish Custom Exceptions
=========================

Exception hierarchy for FestWish with error codes, context information,
and user-friendly messages for slash-command replies.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Error codes for categorizing exceptions."""

    # Configuration errors (C001-C099)
    CONFIG_INVALID = "C001"

    # Storage errors (S001-S099)
    STORAGE_WRITE_ERROR = "S002"

    # Event source errors (E001-E099)
    EVENT_SOURCE_UNAVAILABLE = "E001"
    EVENT_SOURCE_BAD_RESPONSE = "E003"

    # AI text generation errors (A001-A099)
    AI_API_ERROR = "A001"
    AI_INVALID_CREDENTIALS = "A009"

    # Image search errors (I001-I099)
    IMAGE_API_ERROR = "I001"

    # Discord / delivery errors (L001-L099)
    DELIVERY_FAILED = "L001"
    DELIVERY_PERMISSION_DENIED = "L003"

    # Validation errors (V001-V099)
    VALIDATION_INVALID_FORMAT = "V002"
    VALIDATION_INVALID_CHOICE = "V003"

    # System errors (X001-X099)
    SYSTEM_PERMISSION_DENIED = "X001"
    UNEXPECTED = "X999"


class FestWishError(Exception):
    """Base exception for all FestWish errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        context: Optional[Dict[str, Any]] = None,
        user_message: Optional[str] = None,
        recoverable: bool = False,
    ):
        """Initialize FestWish error.

        Args:
            message: Technical error message for logging
            error_code: Categorized error code
            context: Additional context information
            user_message: User-friendly error message
            recoverable: Whether the error is recoverable
        """
        super().__init__(message)
        self.error_code = error_code
        self.context = context or {}
        self.user_message = user_message or message
        self.recoverable = recoverable

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code.value if self.error_code else None,
            "error_message": str(self),
            "user_message": self.user_message,
            "context": self.context,
            "recoverable": self.recoverable,
        }

    def __str__(self) -> str:
        """String representation with error code."""
        if self.error_code:
            return f"[{self.error_code.value}] {super().__str__()}"
        return super().__str__()


def _passthrough(kwargs: Dict[str, Any], *consumed: str) -> Dict[str, Any]:
    return {k: v for k, v in kwargs.items() if k not in consumed}


class ConfigurationError(FestWishError):
    """Configuration-related errors."""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if config_key:
            context["config_key"] = config_key

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.CONFIG_INVALID),
            context=context,
            user_message=kwargs.get("user_message", f"Configuration error: {message}"),
            **_passthrough(kwargs, "context", "error_code", "user_message"),
        )


class StorageError(FestWishError):
    """JSON store read/write errors."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        """Initialize storage error.

        Args:
            message: Error message
            path: File path of the store that failed
            **kwargs: Additional arguments for FestWishError
        """
        context = kwargs.get("context", {})
        if path:
            context["path"] = path

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.STORAGE_WRITE_ERROR),
            context=context,
            user_message=kwargs.get("user_message", "Could not save settings"),
            recoverable=kwargs.get("recoverable", False),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class EventSourceError(FestWishError):
    """Holiday/event provider errors."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if provider:
            context["provider"] = provider

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.EVENT_SOURCE_UNAVAILABLE),
            context=context,
            user_message=kwargs.get("user_message", "Festival calendar unavailable"),
            recoverable=kwargs.get("recoverable", True),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class AIError(FestWishError):
    """AI text generation errors."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        """Initialize AI error.

        Args:
            message: Error message
            provider: AI provider name (e.g., 'gemini')
            **kwargs: Additional arguments for FestWishError
        """
        context = kwargs.get("context", {})
        if provider:
            context["ai_provider"] = provider
        self.provider = provider

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.AI_API_ERROR),
            context=context,
            user_message=kwargs.get(
                "user_message", "AI wish generation temporarily unavailable"
            ),
            recoverable=kwargs.get("recoverable", True),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class ImageSearchError(FestWishError):
    """Image provider errors."""

    def __init__(self, message: str, provider: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if provider:
            context["image_provider"] = provider

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.IMAGE_API_ERROR),
            context=context,
            user_message=kwargs.get("user_message", "Image search unavailable"),
            recoverable=kwargs.get("recoverable", True),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class DeliveryError(FestWishError):
    """Discord message delivery errors."""

    def __init__(
        self,
        message: str,
        guild_id: Optional[str] = None,
        channel_id: Optional[str] = None,
        **kwargs,
    ):
        """Initialize delivery error.

        Args:
            message: Error message
            guild_id: Guild where delivery failed
            channel_id: Channel where delivery failed
            **kwargs: Additional arguments for FestWishError
        """
        context = kwargs.get("context", {})
        if guild_id:
            context["guild_id"] = guild_id
        if channel_id:
            context["channel_id"] = channel_id

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.DELIVERY_FAILED),
            context=context,
            user_message=kwargs.get("user_message", "Message delivery failed"),
            recoverable=kwargs.get("recoverable", True),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


class ValidationError(FestWishError):
    """Slash-command input validation errors."""

    def __init__(self, message: str, field_name: Optional[str] = None, **kwargs):
        """Initialize validation error.

        Args:
            message: Error message
            field_name: Field name that failed validation
            **kwargs: Additional arguments for FestWishError
        """
        context = kwargs.get("context", {})
        if field_name:
            context["field_name"] = field_name

        super().__init__(
            message=message,
            error_code=kwargs.get("error_code", ErrorCode.VALIDATION_INVALID_FORMAT),
            context=context,
            user_message=kwargs.get("user_message", message),
            recoverable=kwargs.get("recoverable", False),
            **_passthrough(kwargs, "context", "error_code", "user_message", "recoverable"),
        )


# Exception handling utilities


def handle_exception(
    exception: Exception,
    logger,
    operation: str,
    context: Optional[Dict[str, Any]] = None,
) -> FestWishError:
    """Convert generic exceptions to FestWish exceptions with proper logging.

    Args:
        exception: Original exception
        logger: Logger instance for error logging
        operation: Operation that was being performed
        context: Additional context information

    Returns:
        FestWish exception with proper categorization
    """
    context = context or {}
    context["operation"] = operation
    context["original_exception_type"] = type(exception).__name__

    if isinstance(exception, FestWishError):
        logger.error(f"Operation '{operation}' failed", extra=exception.to_dict())
        return exception

    elif isinstance(exception, PermissionError):
        error = FestWishError(
            message=f"Permission denied during {operation}: {exception}",
            error_code=ErrorCode.SYSTEM_PERMISSION_DENIED,
            context=context,
            user_message="Access denied",
            recoverable=False,
        )

    elif isinstance(exception, OSError):
        error = StorageError(
            message=f"I/O error during {operation}: {exception}",
            context=context,
        )

    else:
        error = FestWishError(
            message=f"Unexpected error during {operation}: {exception}",
            error_code=ErrorCode.UNEXPECTED,
            context=context,
            user_message="Something went wrong.",
            recoverable=True,
        )

    logger.error(f"Operation '{operation}' failed", extra=error.to_dict())
    return error


def get_user_friendly_message(exception: Exception) -> str:
    """Get user-friendly error message for any exception."""
    if isinstance(exception, FestWishError):
        return exception.user_message

    return "Something went wrong."
