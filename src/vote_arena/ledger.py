"""Vote ledger: records votes and tracks which pairs a voter has judged.

The voted-pairs index is a per-category set of canonical pair keys. It is
cached in local storage as JSON for offline-first reads and can always be
rebuilt from the voter's records in the remote store.
"""

from __future__ import annotations

import itertools
import json
import logging
from collections.abc import Iterable

from .catalog import Catalog
from .config import Config
from .exceptions import (
    DuplicateVoteError,
    InvalidWinnerError,
    LocalStateCorruptError,
    RemoteWriteError,
    VoteArenaError,
)
from .identity import IdentityProvider
from .models import Category, RatingChange, VoteRecord
from .ratelimit import RateLimiter
from .remote.base import RemoteStore
from .reporter.base import ErrorReporter
from .scorer.engine import RatingEngine
from .storage.base import Clock, KeyValueStore, system_clock
from .validator import VoteValidator

logger = logging.getLogger(__name__)

PAIR_DELIMITER = "|"


def pair_key(candidate_a: str, candidate_b: str) -> str:
    """Canonical key for an unordered pair of candidates."""
    return PAIR_DELIMITER.join(sorted((candidate_a, candidate_b)))


class VotedPairs:
    """Per-category sets of pair keys the voter has already voted on."""

    def __init__(self, pairs: dict[Category, set[str]] | None = None):
        self._pairs: dict[Category, set[str]] = {c: set() for c in Category}
        for category, keys in (pairs or {}).items():
            self._pairs[Category(category)].update(keys)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VotedPairs):
            return NotImplemented
        return self._pairs == other._pairs

    def __len__(self) -> int:
        return sum(len(keys) for keys in self._pairs.values())

    def contains(self, category: Category, key: str) -> bool:
        return key in self._pairs[category]

    def add(self, category: Category, key: str) -> bool:
        """Add a key. Returns whether it was new."""
        if key in self._pairs[category]:
            return False
        self._pairs[category].add(key)
        return True

    def keys(self, category: Category) -> list[str]:
        return sorted(self._pairs[category])

    def to_json(self) -> str:
        """Serialize as ``{category: {pair_key: true}}``."""
        return json.dumps(
            {c.value: {k: True for k in sorted(keys)} for c, keys in self._pairs.items()}
        )

    @classmethod
    def from_json(cls, raw: str) -> VotedPairs:
        """Parse the JSON produced by :meth:`to_json`.

        Unknown categories and falsy entries are ignored.

        Raises:
            ValueError: If ``raw`` is not a JSON object of objects.
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"expected object, got {type(data).__name__}")
        pairs: dict[Category, set[str]] = {}
        for name, entries in data.items():
            try:
                category = Category(name)
            except ValueError:
                logger.debug(f"Ignoring unknown category '{name}' in stored votes")
                continue
            if not isinstance(entries, dict):
                raise ValueError(f"expected object for '{name}', got {type(entries).__name__}")
            pairs[category] = {k for k, v in entries.items() if v}
        return cls(pairs)


class VoteLedger:
    """Records votes and answers "has this voter voted on this pair?".

    A vote flows validator, duplicate check, rate-limit check, remote vote
    record, rate-limit commit, rating update, and finally the local index.
    Rejections before the remote write change nothing.

    Example:
        ```python
        if not ledger.has_voted("gpt-4o", "claude-3-7-sonnet", Category.PLANNING):
            await ledger.record_vote(
                "gpt-4o", "claude-3-7-sonnet", "gpt-4o", Category.PLANNING
            )
        ```
    """

    def __init__(
        self,
        storage: KeyValueStore,
        remote: RemoteStore,
        identity: IdentityProvider,
        catalog: Catalog,
        validator: VoteValidator,
        limiter: RateLimiter,
        engine: RatingEngine,
        reporter: ErrorReporter,
        config: Config | None = None,
        clock: Clock | None = None,
    ):
        self.config = config or Config()
        self.storage = storage
        self.remote = remote
        self.identity = identity
        self.catalog = catalog
        self.validator = validator
        self.limiter = limiter
        self.engine = engine
        self.reporter = reporter
        self.pairs = VotedPairs()
        self._clock = clock or system_clock

    @property
    def _key(self) -> str:
        return self.config.storage_keys.voted_pairs

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def has_voted(self, candidate_a: str, candidate_b: str, category: Category | str) -> bool:
        """Whether this voter already voted on the unordered pair in ``category``."""
        parsed = self.validator.parse_category(category)
        return self.pairs.contains(parsed, pair_key(candidate_a, candidate_b))

    def voted_pairs(self, category: Category | str) -> list[str]:
        """Pair keys already voted on in ``category``."""
        return self.pairs.keys(self.validator.parse_category(category))

    def unvoted_pairs(self, category: Category | str) -> list[tuple[str, str]]:
        """Catalog pairs this voter has not voted on in ``category`` yet."""
        parsed = self.validator.parse_category(category)
        return [
            (a, b)
            for a, b in itertools.combinations(self.catalog.ids(), 2)
            if not self.pairs.contains(parsed, pair_key(a, b))
        ]

    def load(self) -> VotedPairs:
        """Read the index from local storage.

        A stored value that cannot be parsed is reported, and the index is
        reset to empty and saved.
        """
        raw = self.storage.get(self._key)
        if raw is None:
            self.pairs = VotedPairs()
            return self.pairs
        try:
            self.pairs = VotedPairs.from_json(raw)
        except ValueError as e:
            error = LocalStateCorruptError(self._key, f"{e}. Resetting votes.")
            logger.error(str(error))
            self.reporter.report_exception(error)
            self.pairs = VotedPairs()
            self.save()
        return self.pairs

    def save(self) -> None:
        """Write the index to local storage."""
        self.storage.set(self._key, self.pairs.to_json(), ttl_seconds=self.config.voted_pairs_ttl_seconds)

    def merge(self, records: Iterable[VoteRecord]) -> int:
        """Add remote vote records to the index. Never removes entries.

        Returns:
            Number of pair keys that were not already present.
        """
        added = 0
        for record in records:
            if self.pairs.add(record.category, pair_key(record.candidate_a, record.candidate_b)):
                added += 1
        return added

    def reset(self) -> None:
        """Forget every voted pair, locally and in storage."""
        self.pairs = VotedPairs()
        self.storage.delete(self._key)

    # ------------------------------------------------------------------
    # Voting
    # ------------------------------------------------------------------

    async def record_vote(
        self,
        candidate_a: str,
        candidate_b: str,
        winner: str,
        category: Category | str,
        now: int | None = None,
    ) -> RatingChange:
        """Record a vote and update both candidates' ratings.

        Args:
            candidate_a: First candidate id.
            candidate_b: Second candidate id.
            winner: Id of the preferred candidate.
            category: Category the vote applies to.
            now: Vote time in epoch milliseconds (defaults to the clock).

        Returns:
            RatingChange describing the rating update.

        Raises:
            InvalidVoteError: If the vote is invalid or a duplicate.
            RateLimitError: If the voter is voting too fast or too often.
            RemoteWriteError: If the vote record could not be stored.
            RatingPersistError: If the new ratings could not be stored. The
                vote still counts and the pair is still marked as voted.
            UnknownCandidateError: If a candidate left the catalog while the
                vote record was being stored. Handled like a persist failure.
        """
        now = self._clock() if now is None else now
        try:
            parsed = self.validator.validate(candidate_a, candidate_b, category)
            key = pair_key(candidate_a, candidate_b)
            if self.config.reject_duplicate_votes and self.pairs.contains(parsed, key):
                raise DuplicateVoteError(key, parsed.value)
            self.limiter.check_rate_limit(now)
            if winner == candidate_a:
                outcome = 0
            elif winner == candidate_b:
                outcome = 1
            else:
                raise InvalidWinnerError(winner, candidate_a, candidate_b)
        except VoteArenaError as e:
            logger.info(f"Vote rejected: {e}")
            self.reporter.report_exception(e)
            raise

        record = VoteRecord(
            candidate_a=candidate_a,
            candidate_b=candidate_b,
            category=parsed,
            outcome=outcome,
            timestamp=now,
            voter_id=self.identity.get_or_create(),
        )

        try:
            await self.remote.insert_vote_record(record)
        except RemoteWriteError as e:
            self._report_write_failure(e)
            raise
        except Exception as e:
            error = RemoteWriteError(str(e), operation="insert_vote_record")
            self._report_write_failure(error)
            raise error from e

        self.limiter.record_success(now)

        # The vote record is stored; from here on the pair counts as voted
        # even if the rating update fails.
        rating_error: VoteArenaError | None = None
        try:
            change = await self.engine.apply_outcome(candidate_a, candidate_b, outcome, parsed)
        except VoteArenaError as e:
            rating_error = e

        self.pairs.add(parsed, key)
        self.save()
        logger.info(f"Vote recorded: {winner} wins {key} in {parsed.value}")

        if rating_error is not None:
            logger.error(f"Rating update failed after vote was recorded: {rating_error}")
            self.reporter.report_exception(rating_error)
            raise rating_error
        return change

    def _report_write_failure(self, error: RemoteWriteError) -> None:
        logger.error(f"Failed to record vote: {error}")
        self.reporter.report(
            "Vote Recording Failed",
            error.detail or "Could not save your vote to the database.",
        )
