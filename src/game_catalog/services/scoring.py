"""Relevance scoring of catalog entries against a text query.

Scores are additive integers. Title matches weigh the most and descriptions
the least; an entry scoring 0 does not match the query at all.
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from ..models.game import GameEntry

TITLE_EXACT = 100
TITLE_PREFIX = 80
TITLE_SUBSTRING = 60
TITLE_WORD = 40

GENRE_EXACT = 70
GENRE_SUBSTRING = 50
GENRE_WORD = 30

TAG_EXACT = 60
TAG_SUBSTRING = 40
TAG_WORD = 25

DEVELOPER_SUBSTRING = 35
DEVELOPER_WORD = 20

DESCRIPTION_SUBSTRING = 25
DESCRIPTION_WORD = 15

FULL_DESCRIPTION_SUBSTRING = 20
FULL_DESCRIPTION_WORD = 10


@dataclass(frozen=True)
class ScoredEntry:
    """An entry paired with its relevance score."""
    entry: GameEntry
    score: int


def normalize_query(query: str) -> tuple[str, list[str]]:
    """Split a query into its case-folded full term and its words."""
    full_term = query.strip().casefold()
    return full_term, full_term.split()


def score_entry(entry: GameEntry, query: str) -> int:
    """Score one entry against a query. Pure; 0 means no match."""
    full_term, words = normalize_query(query)
    if not full_term:
        return 0

    score = _score_title(entry.title.casefold(), full_term, words)
    for genre in entry.genre:
        score += _score_value(genre.casefold(), full_term, words, GENRE_EXACT, GENRE_SUBSTRING, GENRE_WORD)
    for tag in entry.tags:
        score += _score_value(tag.casefold(), full_term, words, TAG_EXACT, TAG_SUBSTRING, TAG_WORD)
    score += _score_text(entry.developer.casefold(), full_term, words, DEVELOPER_SUBSTRING, DEVELOPER_WORD)
    score += _score_text(entry.description.casefold(), full_term, words, DESCRIPTION_SUBSTRING, DESCRIPTION_WORD)
    score += _score_text(
        entry.full_description.casefold(),
        full_term,
        words,
        FULL_DESCRIPTION_SUBSTRING,
        FULL_DESCRIPTION_WORD,
    )
    return score


def _score_title(title: str, full_term: str, words: Sequence[str]) -> int:
    if title == full_term:
        score = TITLE_EXACT
    elif title.startswith(full_term):
        score = TITLE_PREFIX
    elif full_term in title:
        score = TITLE_SUBSTRING
    else:
        score = 0
    return score + TITLE_WORD * sum(1 for word in words if word in title)


def _score_value(
    value: str,
    full_term: str,
    words: Sequence[str],
    exact: int,
    substring: int,
    per_word: int,
) -> int:
    if value == full_term:
        score = exact
    elif full_term in value:
        score = substring
    else:
        score = 0
    return score + per_word * sum(1 for word in words if word in value)


def _score_text(text: str, full_term: str, words: Sequence[str], substring: int, per_word: int) -> int:
    if not text:
        return 0
    score = substring if full_term in text else 0
    return score + per_word * sum(1 for word in words if word in text)


class RelevanceScorer:
    """Ranks entries by ``score_entry``."""

    def score(self, entry: GameEntry, query: str) -> int:
        return score_entry(entry, query)

    def score_all(self, entries: Iterable[GameEntry], query: str) -> list[ScoredEntry]:
        """Score every entry, dropping the ones that do not match."""
        scored = (ScoredEntry(entry, score_entry(entry, query)) for entry in entries)
        return [item for item in scored if item.score > 0]

    def rank(self, entries: Iterable[GameEntry], query: str) -> list[GameEntry]:
        """Matching entries by descending score; ties keep catalog order."""
        scored = self.score_all(entries, query)
        scored.sort(key=lambda item: item.score, reverse=True)
        return [item.entry for item in scored]
