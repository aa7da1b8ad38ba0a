"""Fixed recommendations returned when the match pipeline yields nothing."""

from __future__ import annotations

from .models import EnrichedMovie, FallbackMatch

FALLBACK_MOVIES: tuple[EnrichedMovie, ...] = (
    EnrichedMovie(
        title="Spider-Man: Into the Spider-Verse",
        poster="https://image.tmdb.org/t/p/w500/1E5baAaEse26fej7uHcjOgEE2t2.jpg",
        overview=(
            "Miles Morales becomes the Spider-Man of his reality while crossing "
            "paths with counterparts from other dimensions."
        ),
        rating=8.4,
        runtime=117,
        cast=["Shameik Moore", "Hailee Steinfeld", "Mahershala Ali"],
        watch_on=["Netflix", "Apple TV", "Amazon"],
        trailer="https://www.youtube.com/watch?v=g4Hbz2jLxvQ",
    ),
    EnrichedMovie(
        title="Everything Everywhere All at Once",
        poster="https://image.tmdb.org/t/p/w500/6JjfSchsU6daXk2AKX8EEBjO3Fm.jpg",
        overview=(
            "An unexpected multiverse romp where an exhausted laundromat owner "
            "becomes humanity's unlikely hero."
        ),
        rating=8.0,
        runtime=139,
        cast=["Michelle Yeoh", "Ke Huy Quan", "Stephanie Hsu"],
        watch_on=["Showtime", "Prime Video", "Apple TV"],
        trailer="https://www.youtube.com/watch?v=wxN1T1uxQ2g",
    ),
)


def fallback_match() -> FallbackMatch:
    """Return a fresh fallback result so callers never share mutable lists."""

    return FallbackMatch(movies=[movie.model_copy(deep=True) for movie in FALLBACK_MOVIES])
