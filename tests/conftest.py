"""Shared fixtures for Vote Arena tests."""

import pytest

from vote_arena import (
    Candidate,
    Config,
    ErrorLog,
    InMemoryRemoteStore,
    InMemoryStorage,
    Leaderboard,
    Ratings,
)


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: int = 1_700_000_000_000):
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    """A controllable clock."""
    return FakeClock()


@pytest.fixture
def alpha() -> Candidate:
    """Candidate rated 1000 everywhere."""
    return Candidate(id="alpha", name="Alpha", company="Acme", cost_credits=1.0, speed=100)


@pytest.fixture
def beta() -> Candidate:
    """Second candidate rated 1000 everywhere."""
    return Candidate(id="beta", name="Beta", company="Globex", cost_credits=0.5, speed=60)


@pytest.fixture
def gamma() -> Candidate:
    """Third candidate with a stronger planning rating."""
    ratings = Ratings(planning=1100)
    ratings.recompute_overall()
    return Candidate(id="gamma", name="Gamma", company="Initech", ratings=ratings, speed=80)


@pytest.fixture
def remote(alpha, beta, gamma) -> InMemoryRemoteStore:
    """Remote store holding the three sample candidates."""
    return InMemoryRemoteStore(candidates=[alpha, beta, gamma])


@pytest.fixture
def storage(clock) -> InMemoryStorage:
    """Empty local storage."""
    return InMemoryStorage(clock=clock)


@pytest.fixture
def errors(clock) -> ErrorLog:
    """Error log that does not echo to the logger."""
    return ErrorLog(clock=clock, echo=False)


@pytest.fixture
def config() -> Config:
    """Config that does not seed the remote store."""
    return Config(seed_remote_catalog=False)


@pytest.fixture
def board(config, remote, storage, errors, clock) -> Leaderboard:
    """Leaderboard wired to in-memory collaborators (not yet initialized)."""
    return Leaderboard(
        config,
        remote=remote,
        storage=storage,
        reporter=errors,
        clock=clock,
        seed=7,
    )
