"""
tests/conftest.py - Pytest configuration and fixtures

Shared fixtures:
- seeded_rng: repeatable jitter source
- fake_clock: controllable datetime clock for stability/TTL tests
- example_factors: the reference game (composite 68.9, grade B)
"""

from datetime import datetime, timedelta

import pytest

from core.market_edge import make_rng


class FakeClock:
    """Callable clock that only moves when told to."""

    def __init__(self, start: datetime = datetime(2026, 7, 4, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeMonotonic:
    """Float clock for TTL caches."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def seeded_rng():
    return make_rng(42)


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def fake_monotonic():
    return FakeMonotonic()


@pytest.fixture
def example_factors():
    """Factors [50, 54, 50, 53, 95, 94] keyed by name."""
    return {
        "offensive_production": 50,
        "pitching_matchup": 54,
        "situational_edge": 50,
        "team_momentum": 53,
        "market_inefficiency": 95,
        "system_confidence": 94,
    }


@pytest.fixture
def strong_factors():
    """Composite 80.75 -> A+."""
    return {
        "offensive_production": 88,
        "pitching_matchup": 72,
        "situational_edge": 68,
        "team_momentum": 70,
        "market_inefficiency": 95,
        "system_confidence": 82,
    }


@pytest.fixture
def weak_factors():
    """Composite 35.0 -> F."""
    return {
        "offensive_production": 35,
        "pitching_matchup": 35,
        "situational_edge": 35,
        "team_momentum": 35,
        "market_inefficiency": 35,
        "system_confidence": 35,
    }
