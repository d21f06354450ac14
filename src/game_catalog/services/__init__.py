"""Service layer: catalog loading, caching, search and supporting infrastructure.

Only the error types are re-exported here; the entity models import them,
so this package must not pull in modules that import the models back.
"""

from .errors import (
    AppError,
    ConfigurationError,
    DataSourceError,
    ErrorCategory,
    ErrorHandlingService,
    ErrorSeverity,
    UserFriendlyError,
    ValidationError,
)

__all__ = [
    "AppError",
    "ConfigurationError",
    "DataSourceError",
    "ErrorCategory",
    "ErrorHandlingService",
    "ErrorSeverity",
    "UserFriendlyError",
    "ValidationError",
]
