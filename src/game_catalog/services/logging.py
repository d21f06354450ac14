"""Logging configuration for the game catalog."""

import logging
import logging.handlers
import os
import sys
from pathlib import Path
from typing import Any

import structlog

ENVIRONMENT_VARIABLE = "ENVIRONMENT"

APP_LOG_NAME = "catalog.log"
ERROR_LOG_NAME = "error.log"
APP_LOG_MAX_BYTES = 10 * 1024 * 1024
ERROR_LOG_MAX_BYTES = 5 * 1024 * 1024


class LoggingService:
    """Configures structlog on top of the standard library logging module.

    Development runs get a colored console renderer; production runs and any
    run writing log files get one JSON object per line.
    """

    def __init__(
        self,
        log_level: str = "INFO",
        log_dir: Path | None = None,
        tui_mode: bool = False,
    ) -> None:
        """Initialize the logging service.

        Args:
            log_level: The minimum log level to capture
            log_dir: Directory for log files (None for console only)
            tui_mode: If True, disable console logging so it does not draw over the TUI
        """
        self.log_level = log_level.upper()
        self.log_dir = log_dir
        self.tui_mode = tui_mode
        self.is_development = os.getenv(ENVIRONMENT_VARIABLE, "development") == "development"

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.log_level, logging.INFO)

    @property
    def uses_json(self) -> bool:
        return not self.is_development or self.log_dir is not None

    def configure(self) -> None:
        """Install handlers on the root logger and configure structlog."""
        root_logger = logging.getLogger()
        root_logger.handlers.clear()
        root_logger.setLevel(self.numeric_level)

        if not self.tui_mode:
            root_logger.addHandler(self._console_handler())

        if self.log_dir:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            root_logger.addHandler(
                self._file_handler(APP_LOG_NAME, APP_LOG_MAX_BYTES, backup_count=5, level=self.numeric_level)
            )
            root_logger.addHandler(
                self._file_handler(ERROR_LOG_NAME, ERROR_LOG_MAX_BYTES, backup_count=3, level=logging.ERROR)
            )

        structlog.configure(
            processors=self._get_processors(),
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

    def _console_handler(self) -> logging.Handler:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(self.numeric_level)
        if self.is_development:
            handler.setFormatter(logging.Formatter(
                fmt="%(asctime)s [%(levelname)8s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            ))
        else:
            handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _file_handler(self, name: str, max_bytes: int, backup_count: int, level: int) -> logging.Handler:
        assert self.log_dir is not None
        handler = logging.handlers.RotatingFileHandler(
            filename=self.log_dir / name,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding="utf-8",
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        return handler

    def _get_processors(self) -> list[Any]:
        processors: list[Any] = [
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
        ]
        if self.uses_json:
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer(colors=True))
        return processors

    def get_logger(self, name: str | None = None) -> structlog.stdlib.BoundLogger:
        return structlog.stdlib.get_logger(name)


def setup_logging(
    log_level: str = "INFO",
    log_dir: Path | None = None,
    environment: str | None = None,
    tui_mode: bool = False,
) -> LoggingService:
    """Set up application logging.

    Args:
        log_level: Minimum log level to capture
        log_dir: Directory for log files (None for console only)
        environment: Environment name (development/production)
        tui_mode: If True, disable console logging

    Returns:
        Configured LoggingService instance
    """
    if environment:
        os.environ[ENVIRONMENT_VARIABLE] = environment

    service = LoggingService(log_level=log_level, log_dir=log_dir, tui_mode=tui_mode)
    service.configure()
    return service
