"""Game catalog entity models."""

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from ..services.errors import ValidationError

PLACEHOLDER_THUMBNAIL = "images/placeholder.jpg"


@dataclass(frozen=True)
class DownloadLink:
    """A platform-specific download location for a game."""
    platform: str
    url: str


@dataclass(frozen=True)
class SystemRequirements:
    """Free-text minimum and recommended requirements."""
    minimum: str = ""
    recommended: str = ""


@dataclass(frozen=True)
class GameEntry:
    """One catalog item.

    Entries are immutable value objects. A catalog refresh replaces the
    whole collection instead of updating entries in place.
    """
    id: str
    title: str
    description: str = ""
    full_description: str = ""
    genre: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()
    rating: float = 0.0
    review_count: int = 0
    thumbnail: str = PLACEHOLDER_THUMBNAIL
    screenshots: tuple[str, ...] = ()
    developer: str = ""
    release_date: date | None = None
    official_website: str = ""
    download_links: tuple[DownloadLink, ...] = field(default=())
    system_requirements: SystemRequirements | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValidationError("Game data must include an id", field="id", value=self.id)
        if not isinstance(self.title, str) or not self.title.strip():
            raise ValidationError("Game data must include a title", field="title", value=self.title)
        if not self.full_description:
            object.__setattr__(self, "full_description", self.description)

    @classmethod
    def from_raw(cls, row: Mapping[str, Any], row_index: int | None = None) -> "GameEntry":
        """Build an entry from one raw catalog row.

        Only ``id`` and ``title`` are required. Every other field falls back
        to a safe default when it is missing or malformed.

        Raises:
            ValidationError: If the row is not an object or lacks id/title
        """
        if not isinstance(row, Mapping):
            raise ValidationError(
                "Catalog row must be an object",
                value=row,
                row_index=row_index,
            )

        raw_id = row.get("id")
        # Integer ids are common in hand-written catalogs
        if isinstance(raw_id, int) and not isinstance(raw_id, bool):
            raw_id = str(raw_id)
        if not isinstance(raw_id, str) or not raw_id.strip():
            raise ValidationError(
                "Game data must include id and title",
                field="id",
                value=raw_id,
                row_index=row_index,
            )

        title = row.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError(
                "Game data must include id and title",
                field="title",
                value=title,
                row_index=row_index,
            )

        description = _as_str(row.get("description"))
        return cls(
            id=raw_id,
            title=title,
            description=description,
            full_description=_as_str(row.get("fullDescription")) or description,
            genre=_as_str_tuple(row.get("genre")),
            tags=_as_str_tuple(row.get("tags")),
            rating=parse_rating(row.get("rating")),
            review_count=parse_review_count(row.get("reviewCount")),
            thumbnail=_as_str(row.get("thumbnail")) or PLACEHOLDER_THUMBNAIL,
            screenshots=_as_str_tuple(row.get("screenshots")),
            developer=_as_str(row.get("developer")),
            release_date=parse_release_date(row.get("releaseDate")),
            official_website=_as_str(row.get("officialWebsite")),
            download_links=_parse_download_links(row.get("downloadLinks")),
            system_requirements=_parse_system_requirements(row.get("systemRequirements")),
        )

    @property
    def formatted_rating(self) -> str:
        """Rating with review count, e.g. ``4.5/5 (120 reviews)``."""
        return f"{self.rating:g}/5 ({self.review_count} reviews)"

    @property
    def genre_string(self) -> str:
        return ", ".join(self.genre)

    @property
    def formatted_release_date(self) -> str:
        if self.release_date is None:
            return "Unknown"
        return f"{self.release_date.strftime('%B')} {self.release_date.day}, {self.release_date.year}"

    @property
    def has_screenshots(self) -> bool:
        return len(self.screenshots) > 0

    @property
    def primary_image(self) -> str:
        """First screenshot, or the thumbnail when there are none."""
        return self.screenshots[0] if self.screenshots else self.thumbnail


def parse_rating(value: Any) -> float:
    """Parse a rating into the 0-5 range; anything non-numeric becomes 0."""
    number = _as_number(value)
    if number is None:
        return 0.0
    return min(max(number, 0.0), 5.0)


def parse_review_count(value: Any) -> int:
    """Parse a review count; anything non-numeric or negative becomes 0."""
    number = _as_number(value)
    if number is None:
        return 0
    return max(int(number), 0)


def parse_release_date(value: Any) -> date | None:
    """Parse an ISO date (or datetime) string; anything else becomes None."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _as_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _as_str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _parse_download_links(value: Any) -> tuple[DownloadLink, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    links: list[DownloadLink] = []
    for item in value:
        if not isinstance(item, Mapping):
            continue
        url = _as_str(item.get("url"))
        if url:
            links.append(DownloadLink(platform=_as_str(item.get("platform")), url=url))
    return tuple(links)


def _parse_system_requirements(value: Any) -> SystemRequirements | None:
    if not isinstance(value, Mapping):
        return None
    minimum = _as_str(value.get("minimum"))
    recommended = _as_str(value.get("recommended"))
    if not minimum and not recommended:
        return None
    return SystemRequirements(minimum=minimum, recommended=recommended)
