"""Pydantic models describing preferences and match payloads."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .utils import normalize_room_code

DEFAULT_GENRE = "action"
DEFAULT_LANGUAGE = "en"
DEFAULT_MAX_RUNTIME = 140
DEFAULT_MIN_RATING = 7.0


class PreferenceSubmission(BaseModel):
    """Body of a preference submission for a room."""

    model_config = ConfigDict(populate_by_name=True)

    room_code: str = Field(alias="roomCode", min_length=1)
    genre: str | None = None
    language: str | None = None
    max_runtime: int | None = Field(default=None, gt=0)
    min_rating: float | None = Field(default=None, ge=0, le=10)

    @field_validator("room_code", mode="before")
    @classmethod
    def _normalize_code(cls, value: Any) -> Any:
        if isinstance(value, str):
            return normalize_room_code(value)
        return value

    @field_validator("genre", "language", "max_runtime", "min_rating", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> Any:
        """Store empty form fields as null rather than empty strings."""

        if isinstance(value, str):
            value = value.strip()
            return value or None
        return value

    @field_validator("genre", "language")
    @classmethod
    def _lowercase(cls, value: str | None) -> str | None:
        return value.lower() if value else value


class AggregatedFilter(BaseModel):
    """The single discovery query derived from every preference in a room."""

    genre: str = DEFAULT_GENRE
    language: str = DEFAULT_LANGUAGE
    max_runtime: int | None = DEFAULT_MAX_RUNTIME
    min_rating: float = DEFAULT_MIN_RATING


class EnrichedMovie(BaseModel):
    """A recommendation shown to the room."""

    title: str
    poster: str = ""
    overview: str = ""
    rating: float = 0
    runtime: int | None = None
    cast: list[str] = Field(default_factory=list, max_length=5)
    watch_on: list[str] = Field(default_factory=list, max_length=5)
    trailer: str = ""


class RealMatch(BaseModel):
    """Recommendations genuinely derived from the room's preferences."""

    kind: Literal["real"] = "real"
    movies: list[EnrichedMovie] = Field(min_length=1, max_length=6)
    preference_count: int = Field(ge=0)

    def to_payload(self) -> dict[str, object]:
        return {
            "movies": [movie.model_dump(mode="json") for movie in self.movies],
            "preferenceCount": self.preference_count,
        }


class FallbackMatch(BaseModel):
    """The canned catalog used when the pipeline produced nothing usable."""

    kind: Literal["fallback"] = "fallback"
    movies: list[EnrichedMovie]

    def to_payload(self) -> dict[str, object]:
        return {"movies": [movie.model_dump(mode="json") for movie in self.movies]}


MatchResult = Annotated[Union[RealMatch, FallbackMatch], Field(discriminator="kind")]
