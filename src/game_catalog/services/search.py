"""Search pipeline combining relevance ranking, filters and sorting."""

from collections.abc import Callable, Sequence
from datetime import date
from typing import Any

import structlog

from ..models.game import GameEntry
from ..models.query import ALL_GENRES, QueryState, SortField, SortOrder
from .catalog_loader import CatalogLoader
from .scoring import RelevanceScorer

log = structlog.stdlib.get_logger()


def filter_by_genre(entries: Sequence[GameEntry], genre: str) -> list[GameEntry]:
    """Keep entries having ``genre`` (case-insensitive); ``"all"`` keeps everything."""
    if not genre or genre.casefold() == ALL_GENRES:
        return list(entries)
    wanted = genre.casefold()
    return [entry for entry in entries if any(g.casefold() == wanted for g in entry.genre)]


def filter_by_rating(
    entries: Sequence[GameEntry],
    min_rating: float | None = None,
    max_rating: float | None = None,
) -> list[GameEntry]:
    """Keep entries whose rating lies within the inclusive bounds that are set."""
    result = list(entries)
    if min_rating is not None:
        result = [entry for entry in result if entry.rating >= min_rating]
    if max_rating is not None:
        result = [entry for entry in result if entry.rating <= max_rating]
    return result


def sort_entries(
    entries: Sequence[GameEntry],
    sort_by: SortField,
    sort_order: SortOrder = SortOrder.DESCENDING,
) -> list[GameEntry]:
    """Stable sort by one field. Entries without a release date sort as earliest."""
    sort_key = _SORT_KEYS.get(sort_by)
    if sort_key is None:
        return list(entries)
    return sorted(entries, key=sort_key, reverse=sort_order is SortOrder.DESCENDING)


_SORT_KEYS: dict[SortField, Callable[[GameEntry], Any]] = {
    SortField.RATING: lambda entry: entry.rating,
    SortField.TITLE: lambda entry: entry.title.casefold(),
    SortField.RELEASE_DATE: lambda entry: entry.release_date or date.min,
    SortField.REVIEW_COUNT: lambda entry: entry.review_count,
}


class SearchPipeline:
    """Single entry point for listing, searching and filtering the catalog."""

    def __init__(self, loader: CatalogLoader, scorer: RelevanceScorer | None = None) -> None:
        self.loader = loader
        self.scorer = scorer or RelevanceScorer()

    async def search(self, query: QueryState) -> list[GameEntry]:
        """Run one query against the full catalog.

        Stages run in a fixed order: relevance ranking (only with search
        text), genre filter, rating range, then the explicit sort, which
        replaces relevance order when requested. No matches is an empty
        list, not an error.

        Raises:
            DataSourceError: If the catalog cannot be loaded
            ValidationError: If the catalog contains a malformed row
        """
        games = await self.loader.load_catalog()

        if query.has_text:
            results = self.scorer.rank(games, query.normalized_text)
        else:
            results = list(games)

        if query.has_genre_filter:
            results = filter_by_genre(results, query.genre)

        results = filter_by_rating(results, query.min_rating, query.max_rating)

        if query.sort_by is not None:
            results = sort_entries(results, query.sort_by, query.sort_order)

        log.debug(
            "Search completed",
            search_text=query.search_text,
            genre=query.genre,
            min_rating=query.min_rating,
            max_rating=query.max_rating,
            sort_by=query.sort_by.value if query.sort_by else None,
            results=len(results),
            catalog_size=len(games),
        )
        return results

    async def get_by_id(self, game_id: str) -> GameEntry | None:
        return await self.loader.get_by_id(game_id)

    async def get_genres(self) -> list[str]:
        return await self.loader.get_genres()

    async def refresh(self) -> list[GameEntry]:
        return await self.loader.refresh()
