"""Query state models for the search pipeline."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..services.errors import ValidationError

ALL_GENRES = "all"


class SortField(Enum):
    """Fields an explicit sort can order by."""
    RATING = "rating"
    TITLE = "title"
    RELEASE_DATE = "releaseDate"
    REVIEW_COUNT = "reviewCount"


class SortOrder(Enum):
    """Direction of an explicit sort."""
    ASCENDING = "asc"
    DESCENDING = "desc"


@dataclass(frozen=True)
class QueryState:
    """One search request: text, filters and optional sort.

    Inverted rating bounds are not rejected; they simply match nothing.
    """
    search_text: str = ""
    genre: str = ALL_GENRES
    min_rating: float | None = None
    max_rating: float | None = None
    sort_by: SortField | None = None
    sort_order: SortOrder = SortOrder.DESCENDING

    @property
    def normalized_text(self) -> str:
        """Trimmed, case-folded search text."""
        return self.search_text.strip().casefold()

    @property
    def has_text(self) -> bool:
        return bool(self.normalized_text)

    @property
    def has_genre_filter(self) -> bool:
        return bool(self.genre) and self.genre.casefold() != ALL_GENRES

    @property
    def is_empty(self) -> bool:
        """True when no text, genre or rating filter is active."""
        return (
            not self.has_text
            and not self.has_genre_filter
            and self.min_rating is None
            and self.max_rating is None
        )

    @classmethod
    def from_filters(
        cls,
        search_text: str | None = None,
        genre: str | None = None,
        min_rating: Any = None,
        max_rating: Any = None,
        sort_by: str | SortField | None = None,
        sort_order: str | SortOrder | None = None,
    ) -> "QueryState":
        """Build a query from loosely typed widget or command-line values.

        Empty strings mean "not set". Sort fields accept either the enum
        value (``releaseDate``) or the member name (``release_date``).

        Raises:
            ValidationError: On a non-numeric bound or an unknown sort option
        """
        return cls(
            search_text=(search_text or "").strip(),
            genre=genre.strip() if genre and genre.strip() else ALL_GENRES,
            min_rating=_parse_bound("min_rating", min_rating),
            max_rating=_parse_bound("max_rating", max_rating),
            sort_by=_parse_enum(SortField, "sort_by", sort_by),
            sort_order=_parse_enum(SortOrder, "sort_order", sort_order) or SortOrder.DESCENDING,
        )


def _parse_bound(name: str, value: Any) -> float | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number", field=name, value=value) from e


def _parse_enum(enum_type: type[Enum], name: str, value: Any) -> Any:
    if value is None or value == "":
        return None
    if isinstance(value, enum_type):
        return value
    text = str(value).strip()
    for member in enum_type:
        if text == member.value or text.upper() == member.name:
            return member
    aliases = {"ascending": "ASCENDING", "descending": "DESCENDING"}
    if text.lower() in aliases and aliases[text.lower()] in enum_type.__members__:
        return enum_type[aliases[text.lower()]]
    options = ", ".join(member.value for member in enum_type)
    raise ValidationError(f"{name} must be one of: {options}", field=name, value=value)
