"""Main Leaderboard class for Vote Arena.

This module provides the primary entry point. The Leaderboard wires the
catalog, identity, rate limiter, validator, rating engine, ledger and sync
coordinator together around one remote store and one local storage.
"""

from __future__ import annotations

import functools
import logging
import random
from pathlib import Path

from .catalog import Catalog, load_bundled_catalog
from .config import Config, LeaderboardConfig
from .identity import IdentityProvider
from .ledger import VoteLedger
from .models import Candidate, Category, RatingChange, RatingKey, SyncState
from .ratelimit import RateLimiter
from .remote import InMemoryRemoteStore, RemoteStore
from .reporter import ErrorLog, ErrorReporter
from .scorer import RatingEngine
from .storage import Clock, InMemoryStorage, JsonFileStorage, KeyValueStore, system_clock
from .sync import SyncCoordinator
from .validator import VoteValidator

logger = logging.getLogger(__name__)


class Leaderboard:
    """Main entry point for Vote Arena.

    Example:
        ```python
        from vote_arena import Leaderboard

        async with Leaderboard() as board:
            await board.initialize()
            pair = board.next_pair("planning")
            if pair:
                a, b = pair
                await board.vote(a, b, winner=a, category="planning")
            for candidate in board.standings("planning"):
                print(candidate.name, candidate.ratings.planning)
        ```
    """

    def __init__(
        self,
        config: Config | None = None,
        *,
        remote: RemoteStore | None = None,
        storage: KeyValueStore | None = None,
        reporter: ErrorReporter | None = None,
        catalog_path: str | Path | None = None,
        clock: Clock | None = None,
        seed: int | None = None,
    ):
        """Initialize the Leaderboard.

        Args:
            config: Engine configuration. Uses defaults if not provided.
            remote: Remote store. An empty in-memory store, owned and closed
                by the board, if not provided.
            storage: Local storage. In-memory storage if not provided.
            reporter: Error reporter. An ErrorLog if not provided.
            catalog_path: Bundled catalog file. The packaged catalog if None.
            clock: Millisecond clock.
            seed: Random seed for pair selection.
        """
        self.config = config or Config()
        self.clock = clock or system_clock
        self._owns_remote = remote is None
        self.remote = remote or InMemoryRemoteStore()
        self.storage = storage or InMemoryStorage(clock=self.clock)
        self.reporter = reporter or ErrorLog(clock=self.clock)
        self.catalog = Catalog()
        self._random = random.Random(seed)

        self.identity = IdentityProvider(self.storage, key=self.config.storage_keys.voter_id)
        self.limiter = RateLimiter(self.storage, self.config, reporter=self.reporter, clock=self.clock)
        self.validator = VoteValidator(self.catalog, allow_self_pairing=self.config.allow_self_pairing)
        self.engine = RatingEngine(self.catalog, self.remote, k=self.config.elo_k_factor)
        self.ledger = VoteLedger(
            storage=self.storage,
            remote=self.remote,
            identity=self.identity,
            catalog=self.catalog,
            validator=self.validator,
            limiter=self.limiter,
            engine=self.engine,
            reporter=self.reporter,
            config=self.config,
            clock=self.clock,
        )
        self.sync = SyncCoordinator(
            remote=self.remote,
            catalog=self.catalog,
            identity=self.identity,
            ledger=self.ledger,
            limiter=self.limiter,
            reporter=self.reporter,
            bundled_catalog=functools.partial(self._load_bundled, catalog_path),
            config=self.config,
        )

    @classmethod
    def from_config(cls, path: str | Path, **kwargs) -> Leaderboard:
        """Create a Leaderboard from a YAML configuration file.

        Args:
            path: Path to the YAML configuration file.
            **kwargs: Overrides passed to the constructor (e.g. ``remote``).

        Returns:
            Leaderboard configured from the file.
        """
        board_config = LeaderboardConfig.from_yaml(path)
        if "storage" not in kwargs and board_config.storage_path:
            kwargs["storage"] = JsonFileStorage(board_config.storage_path, clock=kwargs.get("clock"))
        kwargs.setdefault("catalog_path", board_config.catalog_path)
        return cls(config=board_config.voting, **kwargs)

    def _load_bundled(self, path: str | Path | None) -> list[Candidate]:
        candidates = load_bundled_catalog(path)
        for candidate in candidates:
            if "ratings" not in candidate.model_fields_set:
                for category in Category:
                    candidate.ratings.set(category, self.config.initial_rating)
                candidate.ratings.recompute_overall()
        return candidates

    @property
    def state(self) -> SyncState:
        """Current sync state."""
        return self.sync.state

    @property
    def voter_id(self) -> str:
        """This client's anonymous voter identity."""
        return self.identity.get_or_create()

    async def initialize(self) -> SyncState:
        """Restore local state and sync with the remote store."""
        if self.storage.load_error is not None:
            self.reporter.report_exception(self.storage.load_error)
            self.storage.load_error = None
        return await self.sync.initialize()

    async def vote(
        self,
        candidate_a: str,
        candidate_b: str,
        winner: str,
        category: Category | str,
    ) -> RatingChange:
        """Cast a vote for ``winner`` between two candidates.

        See :meth:`VoteLedger.record_vote` for the failure modes.
        """
        return await self.ledger.record_vote(candidate_a, candidate_b, winner, category)

    def has_voted(self, candidate_a: str, candidate_b: str, category: Category | str) -> bool:
        """Whether this voter already voted on the pair in ``category``."""
        return self.ledger.has_voted(candidate_a, candidate_b, category)

    def next_pair(self, category: Category | str) -> tuple[str, str] | None:
        """Pick a random pair this voter has not judged in ``category``.

        Returns:
            A pair of candidate ids in random order, or None when every
            pair has been voted on.
        """
        pairs = self.ledger.unvoted_pairs(category)
        if not pairs:
            return None
        a, b = self._random.choice(pairs)
        return (a, b) if self._random.random() < 0.5 else (b, a)

    def standings(self, key: RatingKey | Category | str = RatingKey.OVERALL) -> list[Candidate]:
        """Candidates ranked by a rating, highest first."""
        return self.catalog.sorted(key, descending=True)

    def reset_identity(self) -> str:
        """Start over with a new voter identity and an empty local index."""
        self.ledger.reset()
        return self.identity.reset()

    async def close(self) -> None:
        """Cancel this board's subscription.

        The remote store is closed only when the board created it; a store
        passed in may be shared with other clients.
        """
        self.sync.close()
        if self._owns_remote:
            await self.remote.close()

    async def __aenter__(self) -> Leaderboard:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
