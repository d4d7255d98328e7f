"""In-memory remote store.

This module provides a process-local implementation of the remote store
contract. It is used for testing the engine without a network service and
as an offline backend.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

from ..exceptions import RemoteReadError, RemoteWriteError
from ..models import METADATA_FIELDS, Candidate, CandidateChange, Ratings, VoteRecord
from .base import ChangeCallback, RemoteStore, Unsubscribe

logger = logging.getLogger(__name__)

_READ_OPERATIONS = {"fetch_candidates", "fetch_vote_records_by_identity"}


class InMemoryRemoteStore(RemoteStore):
    """Remote store kept in process memory.

    Change notifications are delivered as scheduled tasks, the way a push
    channel would deliver them, rather than inline with the write.

    Example:
        ```python
        store = InMemoryRemoteStore(candidates=[gpt, claude])
        store.fail_on.add("insert_vote_record")  # simulate an outage
        ```
    """

    def __init__(
        self,
        candidates: Iterable[Candidate] | None = None,
        records: Iterable[VoteRecord] | None = None,
    ):
        """Initialize the store.

        Args:
            candidates: Initial catalog.
            records: Initial vote records.
        """
        self.candidates: dict[str, Candidate] = {}
        for candidate in candidates or []:
            self.candidates[candidate.id] = candidate.model_copy(deep=True)
        self.records: list[VoteRecord] = list(records or [])
        self.fail_on: set[str] = set()
        self.calls: list[str] = []
        self._subscribers: list[ChangeCallback] = []
        self._pending: set[asyncio.Task] = set()

    @property
    def name(self) -> str:
        """Return the store's name."""
        return "memory"

    def _enter(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.fail_on:
            error_cls = RemoteReadError if operation in _READ_OPERATIONS else RemoteWriteError
            raise error_cls("simulated failure", operation=operation)

    def _notify(self, change: CandidateChange) -> None:
        for callback in list(self._subscribers):
            task = asyncio.ensure_future(callback(change))
            self._pending.add(task)
            task.add_done_callback(self._pending.discard)

    async def drain_notifications(self) -> None:
        """Wait until every scheduled notification callback has finished."""
        while True:
            pending = [t for t in self._pending if not t.done()]
            if not pending:
                break
            await asyncio.gather(*pending, return_exceptions=True)

    async def fetch_candidates(self) -> list[Candidate]:
        self._enter("fetch_candidates")
        return [c.model_copy(deep=True) for c in self.candidates.values()]

    async def insert_candidates(self, candidates: list[Candidate]) -> None:
        self._enter("insert_candidates")
        duplicates = [c.id for c in candidates if c.id in self.candidates]
        if duplicates:
            raise RemoteWriteError(
                f"duplicate candidate ids: {', '.join(duplicates)}",
                operation="insert_candidates",
            )
        for candidate in candidates:
            self.candidates[candidate.id] = candidate.model_copy(deep=True)
            self._notify(CandidateChange(event="insert", candidate_id=candidate.id))

    async def update_candidate_rating(
        self,
        candidate_id: str,
        ratings: Ratings,
        vote_count: int,
    ) -> None:
        self._enter("update_candidate_rating")
        stored = self.candidates.get(candidate_id)
        if stored is None:
            raise RemoteWriteError(
                f"no candidate '{candidate_id}'", operation="update_candidate_rating"
            )
        stored.ratings = ratings.model_copy()
        stored.vote_count = vote_count
        self._notify(CandidateChange(event="update", candidate_id=candidate_id))

    async def update_candidate_metadata(self, candidate_id: str, fields: dict[str, Any]) -> None:
        self._enter("update_candidate_metadata")
        stored = self.candidates.get(candidate_id)
        if stored is None:
            raise RemoteWriteError(
                f"no candidate '{candidate_id}'", operation="update_candidate_metadata"
            )
        unknown = set(fields) - set(METADATA_FIELDS)
        if unknown:
            raise RemoteWriteError(
                f"not metadata fields: {', '.join(sorted(unknown))}",
                operation="update_candidate_metadata",
            )
        for name, value in fields.items():
            setattr(stored, name, value)
        self._notify(CandidateChange(event="update", candidate_id=candidate_id))

    async def insert_vote_record(self, record: VoteRecord) -> None:
        self._enter("insert_vote_record")
        self.records.append(record)

    async def fetch_vote_records_by_identity(self, voter_id: str) -> list[VoteRecord]:
        self._enter("fetch_vote_records_by_identity")
        return [r for r in self.records if r.voter_id == voter_id]

    def subscribe_to_candidate_changes(self, callback: ChangeCallback) -> Unsubscribe:
        self._enter("subscribe_to_candidate_changes")
        self._subscribers.append(callback)
        logger.debug(f"Subscriber added ({len(self._subscribers)} total)")

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    async def close(self) -> None:
        """Drop subscribers and finish pending notifications."""
        self._subscribers.clear()
        await self.drain_notifications()
