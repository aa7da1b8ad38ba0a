import pytest
from pydantic import TypeAdapter, ValidationError

from app.models import (
    EnrichedMovie,
    FallbackMatch,
    MatchResult,
    PreferenceSubmission,
    RealMatch,
)


def test_preference_submission_normalizes_form_values():
    submission = PreferenceSubmission.model_validate(
        {
            "roomCode": " abc234 ",
            "genre": "Comedy",
            "language": "",
            "max_runtime": "110",
            "min_rating": "",
        }
    )

    assert submission.room_code == "ABC234"
    assert submission.genre == "comedy"
    assert submission.language is None
    assert submission.max_runtime == 110
    assert submission.min_rating is None


@pytest.mark.parametrize(
    "payload",
    [
        {"genre": "drama"},
        {"roomCode": "   "},
        {"roomCode": "ABC234", "max_runtime": 0},
        {"roomCode": "ABC234", "min_rating": 11},
    ],
)
def test_preference_submission_rejects_invalid_values(payload):
    with pytest.raises(ValidationError):
        PreferenceSubmission.model_validate(payload)


def test_enriched_movie_caps_cast_and_services():
    with pytest.raises(ValidationError):
        EnrichedMovie(title="Crowded", cast=[f"Actor {index}" for index in range(6)])


def test_match_result_discriminates_variants():
    adapter = TypeAdapter(MatchResult)
    movie = {"title": "Arrival"}

    real = adapter.validate_python({"kind": "real", "movies": [movie], "preference_count": 2})
    fallback = adapter.validate_python({"kind": "fallback", "movies": [movie]})

    assert isinstance(real, RealMatch)
    assert isinstance(fallback, FallbackMatch)
    assert real.to_payload() == {
        "movies": [
            {
                "title": "Arrival",
                "poster": "",
                "overview": "",
                "rating": 0.0,
                "runtime": None,
                "cast": [],
                "watch_on": [],
                "trailer": "",
            }
        ],
        "preferenceCount": 2,
    }
    assert set(fallback.to_payload()) == {"movies"}


def test_real_match_requires_at_least_one_movie():
    with pytest.raises(ValidationError):
        RealMatch(movies=[], preference_count=0)
