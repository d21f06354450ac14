"""Catalog loader: session memo, cache, then the data source."""

import asyncio
import contextlib
from typing import Any

import structlog

from ..models.game import GameEntry
from .cache import CatalogCache
from .catalog_source import CatalogSource, parse_catalog_document
from .errors import ValidationError

log = structlog.stdlib.get_logger()


class CatalogLoader:
    """Produces the in-memory list of ``GameEntry`` for one session.

    Lookup order is the session memo, then a fresh cache record, then the
    data source. Concurrent ``load_catalog()`` calls made while a load is in
    flight all await that same load.

    Malformed rows fail the whole load unless ``skip_invalid_rows`` is set,
    in which case they are logged and dropped.
    """

    def __init__(
        self,
        source: CatalogSource,
        cache: CatalogCache,
        skip_invalid_rows: bool = False,
    ) -> None:
        self.source = source
        self.cache = cache
        self.skip_invalid_rows = skip_invalid_rows
        self._catalog: list[GameEntry] | None = None
        self._pending: asyncio.Future[list[GameEntry]] | None = None
        self.fetch_count = 0

    @property
    def is_loaded(self) -> bool:
        return self._catalog is not None

    async def load_catalog(self) -> list[GameEntry]:
        """Return the catalog, loading it on first use.

        Raises:
            DataSourceError: If the source fails or returns a malformed document
            ValidationError: If a row is malformed and rows are not skipped
        """
        if self._catalog is not None:
            return self._catalog

        if self._pending is None:
            self._pending = asyncio.ensure_future(self._load())
            self._pending.add_done_callback(self._clear_pending)
        else:
            log.debug("Joining in-flight catalog load")

        # Shielded so one cancelled waiter does not abort the shared load
        return await asyncio.shield(self._pending)

    async def refresh(self) -> list[GameEntry]:
        """Drop the cache and memo and load again.

        If the reload fails the previous catalog stays available and the
        error is re-raised.
        """
        pending = self._pending
        if pending is not None:
            # An in-flight load may have read the cache before it gets cleared
            log.debug("Waiting for in-flight catalog load before refreshing")
            with contextlib.suppress(Exception):
                await asyncio.shield(pending)
            if self._pending is pending:
                self._pending = None

        previous = self._catalog
        log.info("Refreshing catalog", had_catalog=previous is not None)
        self.cache.clear()
        self._catalog = None
        try:
            return await self.load_catalog()
        except Exception:
            if previous is not None and self._catalog is None:
                self._catalog = previous
                log.warning("Catalog refresh failed, keeping previous catalog", games=len(previous))
            raise

    async def get_by_id(self, game_id: str) -> GameEntry | None:
        games = await self.load_catalog()
        return next((game for game in games if game.id == game_id), None)

    async def get_genres(self) -> list[str]:
        """Sorted unique genres across the catalog."""
        games = await self.load_catalog()
        return sorted({genre for game in games for genre in game.genre})

    async def _load(self) -> list[GameEntry]:
        record = self.cache.read()
        if record is not None:
            try:
                games = self._build_entries(record.payload)
            except ValidationError as e:
                log.warning("Cached catalog is malformed, discarding it", error=e.message)
                self.cache.clear()
            else:
                log.info("Catalog loaded from cache", games=len(games))
                self._catalog = games
                return games

        self.fetch_count += 1
        log.info("Fetching catalog", source=self.source.location)
        document = await self.source.fetch()
        rows = parse_catalog_document(document, source=self.source.location)

        valid_rows: list[dict[str, Any]] = []
        games = self._build_entries(rows, valid_rows)

        self.cache.write(valid_rows)
        self._catalog = games
        log.info("Catalog loaded from source", games=len(games), rows=len(rows))
        return games

    def _build_entries(
        self,
        rows: list[Any],
        valid_rows: list[dict[str, Any]] | None = None,
    ) -> list[GameEntry]:
        games: list[GameEntry] = []
        for index, row in enumerate(rows):
            try:
                games.append(GameEntry.from_raw(row, row_index=index))
            except ValidationError as e:
                if not self.skip_invalid_rows:
                    raise
                log.warning(
                    "Skipping malformed catalog row",
                    row_index=index,
                    field=e.field,
                    error=e.message,
                )
                continue
            if valid_rows is not None:
                valid_rows.append(row)
        return games

    def _clear_pending(self, future: asyncio.Future[list[GameEntry]]) -> None:
        if self._pending is future:
            self._pending = None
        # Mark the exception retrieved; every waiter already receives it
        if not future.cancelled():
            future.exception()
