"""Sync coordinator: reconciles local state with the remote store.

At startup the coordinator restores the voter's identity and local state,
merges the voter's remote vote history into the local index, loads the
catalog, and subscribes to catalog changes. Each remote step falls back to
local or bundled data on failure, so initialization never aborts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .catalog import Catalog
from .config import Config
from .identity import IdentityProvider
from .ledger import VoteLedger
from .models import Candidate, CandidateChange, SyncState
from .ratelimit import RateLimiter
from .remote.base import RemoteStore, Unsubscribe
from .reporter.base import ErrorReporter

logger = logging.getLogger(__name__)

BundledCatalogLoader = Callable[[], list[Candidate]]


class SyncCoordinator:
    """Drives startup and change-driven reconciliation.

    States move ``UNINITIALIZED -> SYNCING -> READY``. Any failed remote step
    moves the coordinator to ``DEGRADED`` instead of ``READY``; a later
    successful refresh returns it to ``READY``.
    """

    def __init__(
        self,
        remote: RemoteStore,
        catalog: Catalog,
        identity: IdentityProvider,
        ledger: VoteLedger,
        limiter: RateLimiter,
        reporter: ErrorReporter,
        bundled_catalog: BundledCatalogLoader,
        config: Config | None = None,
    ):
        """Initialize the coordinator.

        Args:
            remote: Authoritative store.
            catalog: Catalog to fill.
            identity: Voter identity provider.
            ledger: Ledger whose index is synced.
            limiter: Rate limiter whose counters are restored.
            reporter: Receives every recoverable failure.
            bundled_catalog: Returns the static fallback catalog.
            config: Engine configuration.
        """
        self.config = config or Config()
        self.remote = remote
        self.catalog = catalog
        self.identity = identity
        self.ledger = ledger
        self.limiter = limiter
        self.reporter = reporter
        self._bundled_catalog = bundled_catalog
        self.state = SyncState.UNINITIALIZED
        self._unsubscribe: Unsubscribe | None = None
        self._failures: set[str] = set()

    @property
    def is_subscribed(self) -> bool:
        return self._unsubscribe is not None

    def _fail(self, step: str, title: str, error: BaseException) -> None:
        logger.warning(f"{title}: {error}")
        self._failures.add(step)
        self.reporter.report(title, str(error) or None)
        if self.state is not SyncState.SYNCING:
            self.state = SyncState.DEGRADED

    def _succeed(self, step: str) -> None:
        self._failures.discard(step)
        if self.state is SyncState.DEGRADED and not self._failures:
            logger.info("Remote store reachable again")
            self.state = SyncState.READY

    async def initialize(self) -> SyncState:
        """Run the full startup sequence.

        Returns:
            The resulting state, ``READY`` or ``DEGRADED``.
        """
        self.state = SyncState.SYNCING
        self._failures.clear()

        voter_id = self.identity.get_or_create()
        logger.debug(f"Initializing for voter {voter_id}")
        self.ledger.load()
        self.limiter.load()

        await self.sync_votes()
        if self.config.seed_remote_catalog:
            await self.seed_catalog()
        await self.refresh_catalog()
        self.subscribe()

        self.state = SyncState.DEGRADED if self._failures else SyncState.READY
        logger.info(f"Sync finished: {self.state.value} ({len(self.catalog)} candidates)")
        return self.state

    async def sync_votes(self) -> int:
        """Merge this voter's remote vote records into the local index.

        Returns:
            Number of pair keys added.
        """
        try:
            records = await self.remote.fetch_vote_records_by_identity(
                self.identity.get_or_create()
            )
        except Exception as e:
            self._fail("votes", "Vote Sync Failed", e)
            return 0
        added = self.ledger.merge(records)
        self.ledger.save()
        logger.debug(f"Merged {len(records)} remote votes ({added} new pairs)")
        self._succeed("votes")
        return added

    async def seed_catalog(self) -> int:
        """Bring the remote catalog in line with the bundled one.

        Bundled candidates the remote store lacks are inserted. Remote
        candidates whose descriptive fields differ from the bundled entry
        get those fields updated; their ratings and vote counts are kept.
        A failed update is reported and the rest still run.

        Returns:
            Number of candidates inserted or updated.
        """
        try:
            existing = {c.id: c for c in await self.remote.fetch_candidates()}
            bundled = self._bundled_catalog()
        except Exception as e:
            self._fail("seed", "Catalog Seed Failed", e)
            return 0

        missing = [c for c in bundled if c.id not in existing]
        stale = [
            c for c in bundled
            if c.id in existing and c.metadata() != existing[c.id].metadata()
        ]

        changed = 0
        failed = False
        if stale:
            logger.info(f"Updating {len(stale)} candidates in {self.remote.name}")
        for candidate in stale:
            try:
                await self.remote.update_candidate_metadata(candidate.id, candidate.metadata())
            except Exception as e:
                self._fail("seed", f"Update Candidate Failed ({candidate.id})", e)
                failed = True
                continue
            changed += 1

        if missing:
            logger.info(f"Seeding {len(missing)} candidates into {self.remote.name}")
            try:
                await self.remote.insert_candidates(missing)
            except Exception as e:
                self._fail("seed", "Catalog Seed Failed", e)
                failed = True
            else:
                changed += len(missing)

        if not stale and not missing:
            logger.debug("Remote catalog already matches bundled catalog")
        if not failed:
            self._succeed("seed")
        return changed

    async def refresh_catalog(self) -> str:
        """Reload the catalog from the remote store.

        Falls back to the bundled catalog when the remote store is empty or
        unreachable.

        Returns:
            Where the catalog came from: ``"remote"`` or ``"bundled"``.
        """
        try:
            candidates = await self.remote.fetch_candidates()
        except Exception as e:
            self._fail("catalog", "Catalog Fetch Failed", e)
            self._load_bundled()
            return self.catalog.source

        self._succeed("catalog")
        if candidates:
            self.catalog.replace(candidates, source="remote")
        else:
            logger.info("No candidates in remote store, using bundled catalog")
            self._load_bundled()
        return self.catalog.source

    def _load_bundled(self) -> None:
        try:
            self.catalog.replace(self._bundled_catalog(), source="bundled")
        except Exception as e:
            logger.error(f"Failed to load bundled catalog: {e}")
            self.reporter.report("Catalog Load Failed", str(e))
            self.catalog.replace([], source="empty")

    def subscribe(self) -> bool:
        """Subscribe to catalog changes. Returns whether a subscription is active."""
        if self._unsubscribe is not None:
            return True
        try:
            self._unsubscribe = self.remote.subscribe_to_candidate_changes(self._on_change)
        except Exception as e:
            self._fail("subscribe", "Live Updates Unavailable", e)
            return False
        self._succeed("subscribe")
        return True

    async def _on_change(self, change: CandidateChange) -> None:
        logger.debug(f"Catalog change received: {change.event} {change.candidate_id}")
        await self.refresh_catalog()

    def close(self) -> None:
        """Cancel the change subscription."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
