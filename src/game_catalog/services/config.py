"""Configuration service for managing application settings."""

import json
from pathlib import Path

import structlog

from ..models.config import AppConfig

log = structlog.stdlib.get_logger()

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "game-catalog"
DEFAULT_CATALOG_URL = "data/games.json"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ConfigValue = str | int | float | bool | None


class ValidationResult:
    """Result of configuration validation."""

    def __init__(self, is_valid: bool, errors: list[str] | None = None) -> None:
        self.is_valid: bool = is_valid
        self.errors: list[str] = errors or []


class ConfigurationService:
    """Service for managing application configuration."""

    def __init__(self, config_path: Path | None = None) -> None:
        self.config_path: Path = config_path or DEFAULT_CONFIG_DIR / "config.json"
        log.info("Configuration service initialized", config_path=str(self.config_path))

    def load_config(self) -> AppConfig:
        """Load configuration from file or return default configuration."""
        if not self.config_path.exists():
            log.info("Configuration file not found, using defaults")
            return self.get_default_config()

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            if not isinstance(data, dict):
                raise TypeError(f"Expected a JSON object, got {type(data).__name__}")

            config = self._dict_to_config(data)
            validation_result = self.validate_config(config)

            if not validation_result.is_valid:
                log.warning("Invalid configuration loaded, using defaults", errors=validation_result.errors)
                return self.get_default_config()

            log.info("Configuration loaded successfully")
            return config

        except (OSError, json.JSONDecodeError, KeyError, TypeError, ValueError) as e:
            log.error("Failed to load configuration, using defaults", error=str(e))
            return self.get_default_config()

    def save_config(self, config: AppConfig) -> None:
        """Save configuration to file.

        Raises:
            ValueError: If the configuration does not validate
            OSError: If the file cannot be written
        """
        validation_result = self.validate_config(config)
        if not validation_result.is_valid:
            raise ValueError(f"Invalid configuration: {', '.join(validation_result.errors)}")

        self.config_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(self.config_path, 'w', encoding='utf-8') as f:
                json.dump(self._config_to_dict(config), f, indent=2, ensure_ascii=False)
            log.info("Configuration saved successfully")
        except OSError as e:
            log.error("Failed to save configuration", error=str(e))
            raise

    def validate_config(self, config: AppConfig) -> ValidationResult:
        """Validate configuration settings."""
        errors = []

        if not isinstance(config.catalog_url, str) or not config.catalog_url.strip():
            errors.append("catalog_url cannot be empty")

        if not isinstance(config.cache_path, Path):
            errors.append("cache_path must be a Path object")

        if (
            isinstance(config.cache_ttl_hours, bool)
            or not isinstance(config.cache_ttl_hours, (int, float))
            or config.cache_ttl_hours <= 0
        ):
            errors.append("cache_ttl_hours must be a positive number")

        if (
            isinstance(config.debounce_delay_ms, bool)
            or not isinstance(config.debounce_delay_ms, int)
            or config.debounce_delay_ms < 0
        ):
            errors.append("debounce_delay_ms must be a non-negative integer")
        elif config.debounce_delay_ms > 5000:
            errors.append("debounce_delay_ms should not exceed 5000")

        if not isinstance(config.request_timeout, (int, float)) or config.request_timeout <= 0:
            errors.append("request_timeout must be a positive number")
        elif config.request_timeout > 120:
            errors.append("request_timeout should not exceed 120 seconds")

        if config.log_level not in VALID_LOG_LEVELS:
            errors.append(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")

        if not isinstance(config.skip_invalid_rows, bool):
            errors.append("skip_invalid_rows must be a boolean")

        if isinstance(config.page_size, bool) or not isinstance(config.page_size, int) or config.page_size < 1:
            errors.append("page_size must be a positive integer")
        elif config.page_size > 500:
            errors.append("page_size should not exceed 500")

        return ValidationResult(len(errors) == 0, errors)

    def get_default_config(self) -> AppConfig:
        """Get default configuration."""
        return AppConfig(
            catalog_url=DEFAULT_CATALOG_URL,
            cache_path=self.config_path.parent / "cache.json",
        )

    def _config_to_dict(self, config: AppConfig) -> dict[str, ConfigValue]:
        """Convert AppConfig to dictionary for JSON serialization."""
        return {
            "catalog_url": config.catalog_url,
            "cache_path": str(config.cache_path),
            "cache_ttl_hours": config.cache_ttl_hours,
            "debounce_delay_ms": config.debounce_delay_ms,
            "request_timeout": config.request_timeout,
            "log_level": config.log_level,
            "skip_invalid_rows": config.skip_invalid_rows,
            "page_size": config.page_size,
        }

    def _dict_to_config(self, data: dict[str, ConfigValue]) -> AppConfig:
        """Convert dictionary to AppConfig; missing keys fall back to defaults."""
        defaults = self.get_default_config()

        def number(key: str, default: float) -> float:
            raw = data.get(key, default)
            return float(raw) if isinstance(raw, (int, float)) and not isinstance(raw, bool) else default

        def integer(key: str, default: int) -> int:
            raw = data.get(key, default)
            return int(raw) if isinstance(raw, (int, float)) and not isinstance(raw, bool) else default

        catalog_url = data.get("catalog_url", defaults.catalog_url)
        cache_path = data.get("cache_path")
        skip_invalid = data.get("skip_invalid_rows", defaults.skip_invalid_rows)
        log_level = data.get("log_level", defaults.log_level)

        return AppConfig(
            catalog_url=catalog_url if isinstance(catalog_url, str) else defaults.catalog_url,
            cache_path=Path(cache_path).expanduser() if isinstance(cache_path, str) and cache_path else defaults.cache_path,
            cache_ttl_hours=number("cache_ttl_hours", defaults.cache_ttl_hours),
            debounce_delay_ms=integer("debounce_delay_ms", defaults.debounce_delay_ms),
            request_timeout=number("request_timeout", defaults.request_timeout),
            log_level=log_level.upper() if isinstance(log_level, str) else defaults.log_level,
            skip_invalid_rows=skip_invalid if isinstance(skip_invalid, bool) else defaults.skip_invalid_rows,
            page_size=integer("page_size", defaults.page_size),
        )
