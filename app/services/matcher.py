"""Coordinates preference aggregation, discovery and enrichment for a room."""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy.exc import SQLAlchemyError

from ..errors import EnrichmentFailure, InvalidInput, RoomNotFound, UpstreamUnavailable
from ..fallback_catalog import fallback_match
from ..models import AggregatedFilter, EnrichedMovie, MatchResult, RealMatch
from ..utils import build_image_url, normalize_room_code
from .aggregator import aggregate_preferences
from .rooms import RoomRepository
from .tmdb import POSTER_BASE_URL, Candidate, MovieDetail, TMDBClient
from .watchmode import WatchmodeClient

logger = logging.getLogger(__name__)


class MatchService:
    """Builds a single ranked recommendation list for a room.

    Provider problems never surface to the caller: a failed or empty
    discovery, or a run where every candidate fails enrichment, produces the
    fallback catalog. Only a missing code or an unknown room is reported.
    """

    def __init__(
        self,
        repository: RoomRepository,
        tmdb_client: TMDBClient,
        watchmode_client: WatchmodeClient,
    ):
        self._repository = repository
        self._tmdb = tmdb_client
        self._watchmode = watchmode_client

    async def match(self, room_code: str | None) -> MatchResult:
        code = normalize_room_code(room_code)
        if not code:
            raise InvalidInput("roomCode required")

        room = await self._repository.lookup_room_by_code(code)
        if room is None:
            raise RoomNotFound(code)

        try:
            records = list(await self._repository.list_preferences(room.id))
        except SQLAlchemyError as exc:
            logger.warning("Loading preferences for room %s failed: %s", code, exc)
            return fallback_match()

        filters = aggregate_preferences(records)

        try:
            candidates = await self._tmdb.discover(filters)
        except UpstreamUnavailable as exc:
            logger.info("Discovery unavailable for room %s, using fallback: %s", code, exc)
            return fallback_match()
        if not candidates:
            logger.info("Discovery returned no candidates for room %s", code)
            return fallback_match()

        outcomes = await asyncio.gather(
            *(self._enrich(candidate, filters) for candidate in candidates),
            return_exceptions=True,
        )
        movies: list[EnrichedMovie] = []
        for candidate, outcome in zip(candidates, outcomes):
            if isinstance(outcome, BaseException):
                logger.warning(
                    "Detail fetch failed for TMDB %s: %s", candidate.tmdb_id, outcome
                )
                continue
            movies.append(outcome)

        if not movies:
            logger.info("No candidates survived enrichment for room %s", code)
            return fallback_match()
        return RealMatch(movies=movies, preference_count=len(records))

    async def _enrich(
        self, candidate: Candidate, filters: AggregatedFilter
    ) -> EnrichedMovie:
        detail, services = await asyncio.gather(
            self._tmdb.fetch_details(candidate.tmdb_id),
            self._watchmode.resolve_sources(candidate.tmdb_id),
            return_exceptions=True,
        )
        if isinstance(detail, BaseException):
            if isinstance(detail, EnrichmentFailure):
                raise detail
            raise EnrichmentFailure(candidate.tmdb_id, str(detail)) from detail
        if isinstance(services, BaseException):
            logger.warning(
                "Availability lookup failed for TMDB %s: %s", candidate.tmdb_id, services
            )
            services = []
        return self._assemble(detail, services, candidate, filters)

    @staticmethod
    def _assemble(
        detail: MovieDetail,
        services: list[str],
        candidate: Candidate,
        filters: AggregatedFilter,
    ) -> EnrichedMovie:
        return EnrichedMovie(
            title=detail.title,
            poster=build_image_url(detail.poster_path, POSTER_BASE_URL),
            overview=detail.overview,
            rating=detail.rating or candidate.rating or 0,
            runtime=detail.runtime or candidate.runtime or filters.max_runtime,
            cast=detail.cast,
            watch_on=services,
            trailer=detail.trailer,
        )
