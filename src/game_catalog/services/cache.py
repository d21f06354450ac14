"""Catalog cache with a fixed time-to-live.

The cache is a pure performance optimization: it never raises, and any
storage or decoding failure is handled as a cache miss or a no-op write.
"""

import json
import math
import time
from collections.abc import Callable
from datetime import timedelta
from typing import Any

import structlog

from ..models.cache import CacheRecord
from .storage import KeyValueStore

log = structlog.stdlib.get_logger()

PAYLOAD_KEY = "catalog.payload"
TIMESTAMP_KEY = "catalog.stored_at"
DEFAULT_TTL = timedelta(hours=24)


class CatalogCache:
    """Stores one catalog blob plus its freshness timestamp."""

    def __init__(
        self,
        store: KeyValueStore,
        ttl: timedelta = DEFAULT_TTL,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the cache.

        Args:
            store: Backend holding the payload and timestamp keys
            ttl: How long a record stays fresh after it is written
            clock: Returns the current time in epoch seconds
        """
        self.store = store
        self.ttl = ttl
        self._clock = clock

    def read(self) -> CacheRecord | None:
        """Return the cached record, or None when absent, corrupt or stale.

        Corrupt and stale records are purged from the store.
        """
        try:
            raw_payload = self.store.get(PAYLOAD_KEY)
            raw_timestamp = self.store.get(TIMESTAMP_KEY)
            if raw_payload is None or raw_timestamp is None:
                return None

            stored_at = float(raw_timestamp)
            if not math.isfinite(stored_at):
                raise ValueError(f"Cached timestamp is not finite: {raw_timestamp!r}")
            payload = json.loads(raw_payload)
            if not isinstance(payload, list):
                raise ValueError(f"Expected cached payload to be a list, got {type(payload).__name__}")
        except (OSError, ValueError, TypeError) as e:
            log.warning("Error reading catalog cache, discarding it", error=str(e))
            self.clear()
            return None

        record = CacheRecord(payload=payload, stored_at=stored_at)
        if not self.is_fresh(record):
            log.info("Catalog cache expired", age_seconds=self._clock() - stored_at)
            self.clear()
            return None

        log.debug("Catalog cache hit", rows=len(payload))
        return record

    def write(self, payload: list[dict[str, Any]]) -> None:
        """Persist the payload with the current time; failures are logged only."""
        try:
            self.store.set(PAYLOAD_KEY, json.dumps(payload))
            self.store.set(TIMESTAMP_KEY, repr(self._clock()))
        except (OSError, ValueError, TypeError) as e:
            log.warning("Failed to cache catalog", error=str(e), error_type=type(e).__name__)
            # A payload without its timestamp is unreadable anyway
            self.clear()
            return
        log.debug("Catalog cached", rows=len(payload))

    def clear(self) -> None:
        """Remove both cache keys. Safe to call repeatedly."""
        for key in (PAYLOAD_KEY, TIMESTAMP_KEY):
            try:
                self.store.remove(key)
            except OSError as e:
                log.warning("Failed to clear catalog cache", key=key, error=str(e))

    def is_fresh(self, record: CacheRecord) -> bool:
        # Records stamped in the future come from a skewed clock and count as stale
        age = self._clock() - record.stored_at
        return 0 <= age <= self.ttl.total_seconds()
