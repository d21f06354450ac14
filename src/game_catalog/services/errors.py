"""Error handling module for the game catalog.

This module provides:
- Custom exception classes for catalog failures (data source, validation, configuration)
- User-friendly error message generation with suggested actions
- A centralized error handling service owned by the application context
"""

import json
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any

import httpx
import structlog

log = structlog.stdlib.get_logger()


class ErrorCategory(Enum):
    """Categories of errors for classification and handling."""
    DATA_SOURCE = "data_source"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    CACHE = "cache"
    UNEXPECTED = "unexpected"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ErrorContext:
    """Context information for an error."""
    operation: str
    component: str
    details: dict[str, Any]


@dataclass(frozen=True)
class UserFriendlyError:
    """User-friendly error representation with suggested actions."""
    message: str
    category: ErrorCategory
    severity: ErrorSeverity
    suggested_actions: list[str]
    technical_details: str | None = None
    recoverable: bool = True


class AppError(Exception):
    """Base exception class for catalog errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNEXPECTED,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        suggested_actions: list[str] | None = None,
        technical_details: str | None = None,
        recoverable: bool = True,
        context: ErrorContext | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.suggested_actions = suggested_actions or []
        self.technical_details = technical_details
        self.recoverable = recoverable
        self.context = context

    def to_user_friendly(self) -> UserFriendlyError:
        """Convert to user-friendly error representation."""
        return UserFriendlyError(
            message=self.message,
            category=self.category,
            severity=self.severity,
            suggested_actions=self.suggested_actions,
            technical_details=self.technical_details,
            recoverable=self.recoverable,
        )


class DataSourceError(AppError):
    """Raised when the catalog cannot be fetched or has the wrong shape.

    Always fatal to the load attempt. The loader never retries on its own;
    callers retry through ``CatalogLoader.refresh()``.
    """

    def __init__(
        self,
        message: str,
        source: str | None = None,
        status_code: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        suggested_actions = [
            "Check your internet connection",
            "Press 'r' to try again",
        ]
        if status_code:
            if status_code == 404:
                suggested_actions = [
                    "The catalog location may be wrong",
                    "Check catalog_url in the configuration",
                ]
            elif status_code >= 500:
                suggested_actions = [
                    "The catalog server is experiencing issues",
                    "Press 'r' to try again later",
                ]

        details: list[str] = []
        if status_code:
            details.append(f"Status: {status_code}")
        if source:
            details.append(f"Source: {source}")
        if original_error:
            details.append(f"{type(original_error).__name__}: {original_error}")

        super().__init__(
            message=message,
            category=ErrorCategory.DATA_SOURCE,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details="\n".join(details) or None,
            recoverable=True,
        )
        self.source = source
        self.status_code = status_code
        self.original_error = original_error


class ValidationError(AppError):
    """Raised when a catalog row or input value is malformed."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        row_index: int | None = None,
    ) -> None:
        technical_details = None
        if field:
            technical_details = f"Field: {field}"
        if row_index is not None:
            technical_details = (technical_details or "") + f"\nRow: {row_index}"
        if value is not None:
            value_str = str(value)[:100]
            technical_details = (technical_details or "") + f"\nValue: {value_str}"

        super().__init__(
            message=message,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.WARNING,
            suggested_actions=["Check the catalog data for missing or malformed fields"],
            technical_details=technical_details,
            recoverable=True,
        )
        self.field = field
        self.value = value
        self.row_index = row_index


class ConfigurationError(AppError):
    """Exception for configuration-related errors."""

    def __init__(
        self,
        message: str,
        setting: str | None = None,
        current_value: Any = None,
        expected: str | None = None,
    ) -> None:
        suggested_actions = [
            "Check the configuration settings",
            "Reset to default values if needed",
        ]
        if expected:
            suggested_actions.append(f"Expected: {expected}")

        technical_details = None
        if setting:
            technical_details = f"Setting: {setting}"
        if current_value is not None:
            technical_details = (technical_details or "") + f"\nCurrent: {current_value}"

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.ERROR,
            suggested_actions=suggested_actions,
            technical_details=technical_details,
            recoverable=True,
        )
        self.setting = setting
        self.current_value = current_value
        self.expected = expected


class ErrorHandlingService:
    """Converts exceptions into user-facing errors and keeps a short history.

    One instance lives on the application context; screens and the CLI route
    failures through it so the log carries the technical details while the
    user sees the friendly message.
    """

    def __init__(self, max_history_size: int = 100) -> None:
        self._error_history: list[tuple[float, AppError]] = []
        self._max_history_size = max_history_size
        log.info("Error handling service initialized")

    def handle_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None = None,
    ) -> UserFriendlyError:
        """Handle an error and return a user-friendly representation.

        Args:
            error: The exception that occurred
            operation: The operation being performed
            component: The component where the error occurred
            context: Additional context information

        Returns:
            User-friendly error representation
        """
        app_error = self._convert_to_app_error(error, operation, component, context)
        self._log_error(app_error, operation, component, context)

        self._error_history.append((time.time(), app_error))
        if len(self._error_history) > self._max_history_size:
            self._error_history.pop(0)

        return app_error.to_user_friendly()

    def _convert_to_app_error(
        self,
        error: Exception,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> AppError:
        """Convert a standard exception to an AppError."""
        if isinstance(error, AppError):
            return error

        source = context.get("source") if context else None

        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            return DataSourceError(
                message=self._get_http_error_message(status_code),
                source=str(error.request.url) if error.request else source,
                status_code=status_code,
                original_error=error,
            )
        elif isinstance(error, httpx.TimeoutException):
            return DataSourceError(
                message="The catalog request timed out. The server may be slow or unavailable.",
                source=source,
                original_error=error,
            )
        elif isinstance(error, httpx.RequestError):
            return DataSourceError(
                message="Unable to reach the catalog server. Please check your connection.",
                source=source,
                original_error=error,
            )
        # JSONDecodeError is a ValueError, so it has to be checked first
        elif isinstance(error, json.JSONDecodeError):
            return DataSourceError(
                message="The catalog could not be parsed as JSON.",
                source=source,
                original_error=error,
            )
        elif isinstance(error, OSError):
            return AppError(
                message=f"A file system error occurred: {error}",
                category=ErrorCategory.CACHE,
                severity=ErrorSeverity.WARNING,
                suggested_actions=["Check the cache directory permissions"],
                technical_details=f"{type(error).__name__}: {error}",
            )
        elif isinstance(error, (ValueError, TypeError)):
            return ValidationError(
                message=str(error),
                field=context.get("field") if context else None,
                value=context.get("value") if context else None,
            )

        return AppError(
            message="An unexpected error occurred. Please try again.",
            category=ErrorCategory.UNEXPECTED,
            severity=ErrorSeverity.ERROR,
            technical_details=f"{type(error).__name__}: {error}",
            recoverable=True,
            context=ErrorContext(
                operation=operation,
                component=component,
                details=context or {},
            ),
        )

    @staticmethod
    def _get_http_error_message(status_code: int) -> str:
        """Get a user-friendly message for HTTP status codes."""
        messages = {
            403: "Access to the catalog was denied.",
            404: "The catalog was not found at the configured location.",
            408: "The catalog request timed out. Please try again.",
            429: "Too many requests. Please wait before trying again.",
            500: "The catalog server encountered an error. Please try again later.",
            502: "The catalog server is temporarily unavailable. Please try again later.",
            503: "The catalog service is temporarily unavailable. Please try again later.",
            504: "The catalog server took too long to respond. Please try again.",
        }
        return messages.get(status_code, f"HTTP error {status_code} occurred while loading the catalog.")

    def _log_error(
        self,
        error: AppError,
        operation: str,
        component: str,
        context: dict[str, Any] | None,
    ) -> None:
        """Log error with full technical details."""
        log_method = log.warning if error.severity == ErrorSeverity.WARNING else log.error
        log_method(
            "Error occurred",
            error_message=error.message,
            category=error.category.value,
            severity=error.severity.value,
            operation=operation,
            component=component,
            technical_details=error.technical_details,
            recoverable=error.recoverable,
            context=context,
        )

    def get_recent_errors(self, count: int = 10) -> list[AppError]:
        """Get the most recent errors, oldest first."""
        recent = self._error_history[-count:] if self._error_history else []
        return [error for _, error in recent]

    def get_error_count_by_category(self) -> dict[ErrorCategory, int]:
        """Get count of errors by category."""
        counts: dict[ErrorCategory, int] = {}
        for _, error in self._error_history:
            counts[error.category] = counts.get(error.category, 0) + 1
        return counts

    def create_user_message(
        self,
        error: UserFriendlyError,
        include_suggestions: bool = True,
    ) -> str:
        """Create a formatted user message from an error.

        Args:
            error: The user-friendly error
            include_suggestions: Whether to include suggested actions

        Returns:
            Formatted message string
        """
        parts = [error.message]

        if include_suggestions and error.suggested_actions:
            parts.append("\nSuggested actions:")
            for action in error.suggested_actions[:3]:
                parts.append(f"  • {action}")

        return "\n".join(parts)
