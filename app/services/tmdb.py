"""Utilities for discovering and describing movies via The Movie Database (TMDB)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..config import Settings
from ..errors import EnrichmentFailure, UpstreamUnavailable
from ..models import AggregatedFilter

logger = logging.getLogger(__name__)

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="

GENRE_IDS: dict[str, int] = {
    "action": 28,
    "comedy": 35,
    "drama": 18,
}

MAX_CANDIDATES = 6
MAX_CAST = 5


@dataclass(slots=True)
class Candidate:
    """Movie stub returned by discovery, used to drive enrichment."""

    tmdb_id: int
    rating: float | None = None
    runtime: int | None = None


@dataclass(slots=True)
class MovieDetail:
    """Normalized view of a TMDB movie detail response."""

    tmdb_id: int
    title: str
    overview: str = ""
    poster_path: str | None = None
    rating: float | None = None
    runtime: int | None = None
    cast: list[str] = field(default_factory=list)
    trailer: str = ""


class TMDBClient:
    """Client for the TMDB discover and movie detail endpoints."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def enabled(self) -> bool:
        return bool(self._settings.tmdb_api_key)

    async def discover(self, filters: AggregatedFilter) -> list[Candidate]:
        """Return up to six popular movies matching the aggregated filter."""

        if not self.enabled:
            raise UpstreamUnavailable("TMDB API key is not configured")

        params = self._discover_params(filters)
        try:
            response = await self._client.get("/discover/movie", params=params)
        except httpx.HTTPError as exc:
            raise UpstreamUnavailable(f"TMDB discover request failed: {exc}") from exc
        if response.status_code >= 400:
            raise UpstreamUnavailable(
                f"TMDB discover failed ({response.status_code})"
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamUnavailable("TMDB discover returned invalid JSON") from exc

        results = payload.get("results") if isinstance(payload, dict) else None
        if not isinstance(results, list):
            return []

        candidates: list[Candidate] = []
        for entry in results[:MAX_CANDIDATES]:
            if not isinstance(entry, dict):
                continue
            tmdb_id = _coerce_int(entry.get("id"))
            if tmdb_id is None:
                logger.warning("Skipping TMDB discover entry with id %r", entry.get("id"))
                continue
            candidates.append(
                Candidate(
                    tmdb_id=tmdb_id,
                    rating=_coerce_float(entry.get("vote_average")),
                    runtime=_coerce_int(entry.get("runtime")),
                )
            )
        return candidates

    def _discover_params(self, filters: AggregatedFilter) -> dict[str, Any]:
        params: dict[str, Any] = {
            "api_key": self._settings.tmdb_api_key,
            "sort_by": "popularity.desc",
            "vote_average.gte": filters.min_rating,
            "include_adult": "false",
            "with_original_language": filters.language,
        }
        if filters.max_runtime:
            params["with_runtime.lte"] = filters.max_runtime
        genre_id = GENRE_IDS.get(filters.genre)
        if genre_id is not None:
            params["with_genres"] = str(genre_id)
        return params

    async def fetch_details(self, tmdb_id: int) -> MovieDetail:
        """Fetch metadata, cast and trailer for a single movie in one call."""

        if not self.enabled:
            raise EnrichmentFailure(tmdb_id, "TMDB API key is not configured")

        params = {
            "api_key": self._settings.tmdb_api_key,
            "append_to_response": "videos,credits",
        }
        try:
            response = await self._client.get(f"/movie/{tmdb_id}", params=params)
        except httpx.HTTPError as exc:
            raise EnrichmentFailure(tmdb_id, str(exc)) from exc
        if response.status_code >= 400:
            raise EnrichmentFailure(tmdb_id, f"status {response.status_code}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise EnrichmentFailure(tmdb_id, "invalid JSON") from exc
        if not isinstance(payload, dict):
            raise EnrichmentFailure(tmdb_id, "unexpected payload")

        # Unnamed credits are skipped before truncating to five names.
        credits = payload.get("credits") or {}
        cast_entries = credits.get("cast") if isinstance(credits, dict) else None
        cast = [
            str(member["name"])
            for member in (cast_entries or [])
            if isinstance(member, dict) and member.get("name")
        ][:MAX_CAST]

        return MovieDetail(
            tmdb_id=tmdb_id,
            title=str(payload.get("title") or payload.get("original_title") or ""),
            overview=payload.get("overview") or "",
            poster_path=payload.get("poster_path"),
            rating=_coerce_float(payload.get("vote_average")),
            runtime=_coerce_int(payload.get("runtime")),
            cast=cast,
            trailer=self.extract_trailer(payload.get("videos")),
        )

    @staticmethod
    def extract_trailer(videos: Any) -> str:
        """Return the first YouTube trailer URL, or an empty string."""

        if not isinstance(videos, dict):
            return ""
        for video in videos.get("results") or []:
            if not isinstance(video, dict):
                continue
            if (
                video.get("site") == "YouTube"
                and video.get("type") == "Trailer"
                and video.get("key")
            ):
                return f"{YOUTUBE_WATCH_URL}{video['key']}"
        return ""


def _coerce_float(value: Any) -> float | None:
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def _coerce_int(value: Any) -> int | None:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None
