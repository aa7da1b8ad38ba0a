"""Error kinds raised by the match pipeline and its collaborators."""

from __future__ import annotations


class MovieNightError(Exception):
    """Base error for the service."""


class InvalidInput(MovieNightError):
    """Raised when a required request field is missing or malformed."""


class RoomNotFound(MovieNightError):
    """Raised when a room code has no matching room."""

    def __init__(self, code: str):
        super().__init__(f"Room {code} not found")
        self.code = code


class UpstreamUnavailable(MovieNightError):
    """Raised when the discovery provider is unreachable or not configured."""


class EnrichmentFailure(MovieNightError):
    """Raised when details for a single candidate cannot be fetched."""

    def __init__(self, tmdb_id: int, reason: str):
        super().__init__(f"Enrichment failed for {tmdb_id}: {reason}")
        self.tmdb_id = tmdb_id


class RoomCodeExhausted(MovieNightError):
    """Raised when no unique room code could be allocated."""
