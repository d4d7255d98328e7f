"""Core data models for Vote Arena.

This module defines the primary data structures used throughout the package:
- Category / RatingKey: the voting axes and the derived ``overall`` key
- Ratings: per-category integer ratings with a derived overall score
- Candidate: a rateable entity in the catalog
- VoteRecord: an immutable pairwise vote
- Supporting state and result types
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class Category(str, Enum):
    """The fixed capability categories candidates are voted on."""

    AGENTIC = "agentic"
    PLANNING = "planning"
    DEBUGGING = "debugging"
    REFACTORING = "refactoring"
    EXPLAINING = "explaining"

    @classmethod
    def values(cls) -> list[str]:
        """Return the raw category strings in declaration order."""
        return [c.value for c in cls]


class RatingKey(str, Enum):
    """Every rating a candidate carries: the categories plus ``overall``."""

    OVERALL = "overall"
    AGENTIC = "agentic"
    PLANNING = "planning"
    DEBUGGING = "debugging"
    REFACTORING = "refactoring"
    EXPLAINING = "explaining"


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Ratings(BaseModel):
    """Integer ratings for one candidate.

    ``overall`` is derived from the five category ratings and is kept in
    sync by :meth:`recompute_overall`.
    """

    overall: int = 1000
    agentic: int = 1000
    planning: int = 1000
    debugging: int = 1000
    refactoring: int = 1000
    explaining: int = 1000

    def get(self, key: RatingKey | Category) -> int:
        """Return the rating stored under ``key``."""
        return _RATING_GETTERS[RatingKey(key.value)](self)

    def set(self, category: Category, value: int) -> None:
        """Set a category rating. ``overall`` cannot be set directly."""
        _RATING_SETTERS[category](self, value)

    def category_values(self) -> list[int]:
        """Return the five category ratings in declaration order."""
        return [self.get(c) for c in Category]

    def recompute_overall(self) -> int:
        """Recompute ``overall`` as the rounded mean of the category ratings."""
        values = self.category_values()
        self.overall = round_half_away(sum(values) / len(values))
        return self.overall

    def by_category(self) -> dict[str, int]:
        """Return the category ratings keyed by category value."""
        return {c.value: self.get(c) for c in Category}


_RATING_GETTERS = {
    RatingKey.OVERALL: lambda r: r.overall,
    RatingKey.AGENTIC: lambda r: r.agentic,
    RatingKey.PLANNING: lambda r: r.planning,
    RatingKey.DEBUGGING: lambda r: r.debugging,
    RatingKey.REFACTORING: lambda r: r.refactoring,
    RatingKey.EXPLAINING: lambda r: r.explaining,
}


def _set_agentic(r: Ratings, v: int) -> None:
    r.agentic = v


def _set_planning(r: Ratings, v: int) -> None:
    r.planning = v


def _set_debugging(r: Ratings, v: int) -> None:
    r.debugging = v


def _set_refactoring(r: Ratings, v: int) -> None:
    r.refactoring = v


def _set_explaining(r: Ratings, v: int) -> None:
    r.explaining = v


_RATING_SETTERS = {
    Category.AGENTIC: _set_agentic,
    Category.PLANNING: _set_planning,
    Category.DEBUGGING: _set_debugging,
    Category.REFACTORING: _set_refactoring,
    Category.EXPLAINING: _set_explaining,
}


METADATA_FIELDS = ("name", "company", "cost_credits", "context_window", "speed", "logo_url")


class Candidate(BaseModel):
    """A rateable entity on the leaderboard.

    Attributes:
        id: Unique, stable identifier.
        name: Display name.
        company: Provider of the candidate.
        cost_credits: Cost per use, in credits.
        context_window: Context window size in tokens.
        speed: Throughput in tokens per second.
        logo_url: Optional logo location.
        ratings: Per-category and overall ratings.
        vote_count: Number of votes the candidate took part in.
    """

    id: str
    name: str = ""
    company: str = ""
    cost_credits: float = 0.0
    context_window: int = 0
    speed: float = 0.0
    logo_url: str | None = None
    ratings: Ratings = Field(default_factory=Ratings)
    vote_count: int = Field(default=0, ge=0)

    def metadata(self) -> dict[str, Any]:
        """Descriptive fields, i.e. everything except ratings and vote count."""
        return {name: getattr(self, name) for name in METADATA_FIELDS}


class VoteRecord(BaseModel):
    """A single pairwise vote. Immutable once created.

    Attributes:
        candidate_a: First candidate id.
        candidate_b: Second candidate id.
        category: Category the vote applies to.
        outcome: 0 if candidate A won, 1 if candidate B won.
        timestamp: Epoch milliseconds when the vote was cast.
        voter_id: Anonymous identity of the voter.
    """

    model_config = ConfigDict(frozen=True)

    candidate_a: str
    candidate_b: str
    category: Category
    outcome: Literal[0, 1]
    timestamp: int
    voter_id: str


class RateLimitState(BaseModel):
    """Per-identity voting cadence counters (epoch milliseconds)."""

    last_vote_timestamp: int = 0
    hourly_window_start: int = 0
    hourly_count: int = 0


class RatingChange(BaseModel):
    """Before/after snapshot of a single rating update.

    Attributes:
        category: Category that was voted on.
        candidate_a: First candidate id.
        candidate_b: Second candidate id.
        before_a: A's category rating before the vote.
        before_b: B's category rating before the vote.
        after_a: A's category rating after the vote.
        after_b: B's category rating after the vote.
        overall_a: A's overall rating after the vote.
        overall_b: B's overall rating after the vote.
    """

    category: Category
    candidate_a: str
    candidate_b: str
    before_a: int
    before_b: int
    after_a: int
    after_b: int
    overall_a: int
    overall_b: int


class CandidateChange(BaseModel):
    """A change notification pushed by the remote store."""

    event: Literal["insert", "update", "delete"]
    candidate_id: str | None = None


class SyncState(str, Enum):
    """Lifecycle of the sync coordinator."""

    UNINITIALIZED = "uninitialized"
    SYNCING = "syncing"
    READY = "ready"
    DEGRADED = "degraded"


class AppError(BaseModel):
    """An error surfaced to the user.

    Attributes:
        id: Unique identifier, used for dismissal.
        title: Short headline.
        detail: Optional longer explanation.
        timestamp: Epoch milliseconds when the error was reported.
        auto_dismiss_ms: Delay before the error expires (None keeps it).
    """

    id: str
    title: str
    detail: str | None = None
    timestamp: int
    auto_dismiss_ms: int | None = 5000

    def is_expired(self, now: int) -> bool:
        """Whether the auto-dismiss delay has elapsed at ``now``."""
        if self.auto_dismiss_ms is None or self.auto_dismiss_ms <= 0:
            return False
        return now - self.timestamp >= self.auto_dismiss_ms
