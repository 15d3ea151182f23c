"""Shared fixtures for catcher_coach tests."""

from datetime import datetime, timedelta, timezone

import pytest

from catcher_coach.config import Settings


class FakeClock:
    """Controllable replacement for datetime.now(timezone.utc)."""

    def __init__(self, start: datetime = datetime(2024, 3, 1, 16, 0, tzinfo=timezone.utc)) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, minutes: float = 0, seconds: float = 0) -> None:
        self.now += timedelta(minutes=minutes, seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def settings() -> Settings:
    """Settings that ignore any local .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def sample_assessment() -> dict:
    """A plausible self-rated assessment; throwing is the weakest category."""
    return {
        "assessment_id": "a-200",
        "user_id": "user-1",
        "created_at": "2024-03-01T00:00:00Z",
        "receiving_glove_move": 6,
        "receiving_glove_load": 5,
        "receiving_setups": 7,
        "receiving_presentation": 6,
        "throwing_footwork": 4,
        "throwing_exchange": 3,
        "throwing_arm_strength": 5,
        "throwing_accuracy": 4,
        "blocking_overall": 5,
        "education_pitch_calling": 6,
        "education_scouting_reports": 5,
        "education_umpire_relations": 7,
        "education_pitcher_relations": 6,
    }


@pytest.fixture
def previous_assessment(sample_assessment) -> dict:
    """Same athlete two months earlier, one point lower on every throwing skill."""
    previous = dict(sample_assessment)
    previous.update({
        "assessment_id": "a-100",
        "created_at": "2024-01-01T00:00:00Z",
        "throwing_footwork": 3,
        "throwing_exchange": 2,
        "throwing_arm_strength": 4,
        "throwing_accuracy": 3,
    })
    return previous
