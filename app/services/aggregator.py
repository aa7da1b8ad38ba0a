"""Reduce a room's preference records into one discovery filter."""

from __future__ import annotations

from typing import Iterable, Protocol

from ..models import (
    DEFAULT_GENRE,
    DEFAULT_LANGUAGE,
    DEFAULT_MAX_RUNTIME,
    DEFAULT_MIN_RATING,
    AggregatedFilter,
)


class PreferenceLike(Protocol):
    genre: str | None
    language: str | None
    max_runtime: int | None
    min_rating: float | None


def pick_most_frequent(values: Iterable[str | None], default: str) -> str:
    """Return the most frequent non-empty value.

    Values are counted in the order given and a value only takes the lead on a
    strictly greater count, so the first value to reach the winning count wins
    ties.
    """

    counts: dict[str, int] = {}
    for value in values:
        if value:
            counts[value] = counts.get(value, 0) + 1

    leader = default
    best = 0
    for value, count in counts.items():
        if count > best:
            leader = value
            best = count
    return leader


def aggregate_preferences(records: Iterable[PreferenceLike]) -> AggregatedFilter:
    """Combine preference records; the most restrictive numeric limits win."""

    rows = list(records or ())
    if not rows:
        return AggregatedFilter()

    runtimes = [int(row.max_runtime) for row in rows if row.max_runtime]
    ratings = [float(row.min_rating) for row in rows if row.min_rating]

    return AggregatedFilter(
        genre=pick_most_frequent((row.genre for row in rows), DEFAULT_GENRE),
        language=pick_most_frequent((row.language for row in rows), DEFAULT_LANGUAGE),
        max_runtime=min(runtimes) if runtimes else DEFAULT_MAX_RUNTIME,
        min_rating=max(ratings) if ratings else DEFAULT_MIN_RATING,
    )
