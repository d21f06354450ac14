"""Cache record model."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheRecord:
    """Raw catalog rows persisted together with their fetch time."""
    payload: list[dict[str, Any]]
    stored_at: float  # epoch seconds of the last successful network fetch
