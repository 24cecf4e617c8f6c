"""
Zowekit Error Hierarchy

Base error and specific error types for all Zowekit components.
Errors carry metadata for structured logging.
"""

from typing import Any, Dict, Optional

EXPECT_PREFIX = "Expect Error: "


class ZoweError(RuntimeError):
    """
    Base error for Zowekit components. Carries metadata for structured logging.

    Attributes:
        category: Error category for classification (e.g., "runtime", "validation")
        retryable: Whether the operation can be retried
        metadata: Additional context for logging and debugging
    """

    category: str = "runtime"
    retryable: bool = True

    def __init__(
        self,
        message: str,
        *,
        metadata: Optional[Dict[str, Any]] = None,
        retryable: Optional[bool] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}
        if retryable is not None:
            self.retryable = retryable


# Validation Errors
class ValidationError(ZoweError):
    """Raised when input validation fails."""

    category = "validation"
    retryable = False


# Configuration Errors
class ConfigError(ZoweError):
    """Raised when configuration or a profile is invalid or missing."""

    category = "config"
    retryable = False


# REST Errors
class RestClientError(ZoweError):
    """
    Raised when z/OSMF answers with a non-success status.

    Attributes:
        status_code: HTTP status of the response
        rc / reason / error_category: z/OSMF error fields when the body was JSON
        details: Extra detail lines reported by z/OSMF
    """

    category = "rest"
    retryable = False

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        rc: Optional[int] = None,
        reason: Optional[int] = None,
        error_category: Optional[int] = None,
        details: Optional[list] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, metadata=metadata)
        self.status_code = status_code
        self.rc = rc
        self.reason = reason
        self.error_category = error_category
        self.details = details or []


class ZosmfNotFoundError(RestClientError):
    """Raised when z/OSMF reports the requested resource does not exist."""

    category = "rest"


# Jobs Errors
class JobTimeoutError(ZoweError):
    """Raised when a job or workflow does not reach the expected state in time."""

    category = "jobs"
    retryable = True


# Event Errors
class EventError(ZoweError):
    """Base class for event processor errors."""

    category = "events"
    retryable = False


class ProcessorPermissionError(EventError):
    """Raised when a processor is used in a role it was not created for."""

    category = "events"


class ApplicationNotFoundError(EventError):
    """Raised when an event application name is not registered."""

    category = "events"


# Plugin Errors
class PluginError(ZoweError):
    """Raised when a plugin cannot be loaded or registered."""

    category = "plugins"
    retryable = False


def expect_defined(value: Any, what: str = "Required object") -> Any:
    """Raise a ValidationError when ``value`` is None."""
    if value is None:
        raise ValidationError(f"{EXPECT_PREFIX}{what} must be defined")
    return value


def expect_non_blank(value: Optional[str], message: str) -> str:
    """Raise a ValidationError with ``message`` when ``value`` is None or blank."""
    if value is None or not str(value).strip():
        raise ValidationError(f"{EXPECT_PREFIX}{message}")
    return value
