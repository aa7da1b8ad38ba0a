"""Helper client resolving streaming availability through Watchmode."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..config import Settings
from ..utils import unique_in_order

logger = logging.getLogger(__name__)

OFFER_TYPES = frozenset({"sub", "free", "rent", "buy"})
MAX_SERVICES = 5


class WatchmodeClient:
    """Wrapper around the Watchmode search and title source endpoints."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient):
        self._settings = settings
        self._client = http_client

    @property
    def enabled(self) -> bool:
        return bool(self._settings.watchmode_api_key)

    async def resolve_sources(self, tmdb_id: int) -> list[str]:
        """Return up to five service names carrying the movie.

        Never raises: missing credentials, transport errors, error statuses and
        unknown titles all resolve to an empty list.
        """

        if not self.enabled:
            return []

        try:
            watchmode_id = await self._lookup_title_id(tmdb_id)
            if watchmode_id is None:
                return []
            sources = await self._get_json(f"/title/{watchmode_id}/sources/", {})
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Watchmode lookup failed for TMDB %s: %s", tmdb_id, exc)
            return []

        if not isinstance(sources, list):
            return []
        return self.select_service_names(sources)

    async def _lookup_title_id(self, tmdb_id: int) -> Any:
        params = {
            "search_field": "tmdb_id",
            "search_value": tmdb_id,
            "types": "movie",
        }
        payload = await self._get_json("/search/", params)
        if not isinstance(payload, dict):
            return None
        results = payload.get("title_results")
        if not isinstance(results, list) or not results:
            return None
        if not isinstance(results[0], dict):
            return None
        return results[0].get("id") or None

    async def _get_json(self, path: str, params: dict[str, Any]) -> Any:
        response = await self._client.get(
            path, params={"apiKey": self._settings.watchmode_api_key, **params}
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def select_service_names(sources: list[Any]) -> list[str]:
        """Keep watchable offers, deduplicated by name in first-seen order."""

        names = (
            str(source.get("name") or "")
            for source in sources
            if isinstance(source, dict)
            and isinstance(source.get("type"), str)
            and source["type"] in OFFER_TYPES
        )
        return unique_in_order(names, limit=MAX_SERVICES)
