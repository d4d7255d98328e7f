"""Base interface for the remote persistence and notification service.

The remote store is the authoritative copy of the candidate catalog and of
every vote record. The engine only needs a small CRUD surface plus a change
feed for the catalog; any backend that provides these can be plugged in.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models import Candidate, CandidateChange, Ratings, VoteRecord

ChangeCallback = Callable[["CandidateChange"], Awaitable[None]]
Unsubscribe = Callable[[], None]


class RemoteStore(ABC):
    """Abstract base class for remote stores.

    Implementations raise :class:`~vote_arena.exceptions.RemoteReadError` or
    :class:`~vote_arena.exceptions.RemoteWriteError` on failure. Callers also
    treat any other exception as a failure of the operation.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the store's name identifier."""
        ...

    @abstractmethod
    async def fetch_candidates(self) -> list[Candidate]:
        """Return every candidate in the catalog."""
        ...

    @abstractmethod
    async def insert_candidates(self, candidates: list[Candidate]) -> None:
        """Add new candidates to the catalog."""
        ...

    @abstractmethod
    async def update_candidate_rating(
        self,
        candidate_id: str,
        ratings: Ratings,
        vote_count: int,
    ) -> None:
        """Overwrite a candidate's ratings and vote count.

        There is no version check: the last write wins.
        """
        ...

    @abstractmethod
    async def update_candidate_metadata(self, candidate_id: str, fields: dict[str, Any]) -> None:
        """Overwrite a candidate's descriptive fields.

        Args:
            candidate_id: Candidate to update.
            fields: Subset of ``METADATA_FIELDS``. Ratings and vote count are
                never touched.
        """
        ...

    @abstractmethod
    async def insert_vote_record(self, record: VoteRecord) -> None:
        """Append a vote record."""
        ...

    @abstractmethod
    async def fetch_vote_records_by_identity(self, voter_id: str) -> list[VoteRecord]:
        """Return every vote record cast by ``voter_id``."""
        ...

    @abstractmethod
    def subscribe_to_candidate_changes(self, callback: ChangeCallback) -> Unsubscribe:
        """Register ``callback`` for catalog changes.

        Returns:
            A function that cancels the subscription.
        """
        ...

    async def close(self) -> None:
        """Release any resources held by the store."""

    async def __aenter__(self) -> RemoteStore:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - cleanup resources."""
        await self.close()
