"""Configuration data models."""

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AppConfig:
    """Application configuration settings."""
    catalog_url: str
    cache_path: Path
    cache_ttl_hours: float = 24.0
    debounce_delay_ms: int = 300
    request_timeout: float = 10.0
    log_level: str = "INFO"
    skip_invalid_rows: bool = False  # False = one malformed row fails the whole load
    page_size: int = 20
