"""Rating engine: applies a vote outcome to the catalog and persists it."""

from __future__ import annotations

import asyncio
import logging

from ..catalog import Catalog
from ..exceptions import RatingPersistError
from ..models import Candidate, Category, RatingChange
from ..remote.base import RemoteStore
from .elo import ELO

logger = logging.getLogger(__name__)


class RatingEngine:
    """Updates candidate ratings after a vote.

    Ratings are changed in place on the catalog's candidates, then written
    to the remote store. A failed write does not undo the in-memory change.
    """

    def __init__(self, catalog: Catalog, remote: RemoteStore, k: int = ELO.DEFAULT_K):
        """Initialize the engine.

        Args:
            catalog: Catalog whose candidates are updated.
            remote: Store the updated ratings are written to.
            k: K-factor for rating updates (default 32).
        """
        self.catalog = catalog
        self.remote = remote
        self.k = k

    async def apply_outcome(
        self,
        candidate_a: str,
        candidate_b: str,
        outcome: int,
        category: Category,
    ) -> RatingChange:
        """Apply one vote to both candidates.

        When both ids name the same candidate (self-pairing enabled), its
        rating is left as is and its vote count goes up by one.

        Args:
            candidate_a: First candidate id.
            candidate_b: Second candidate id.
            outcome: 0 if A won, 1 if B won.
            category: Category that was voted on.

        Returns:
            RatingChange describing the update.

        Raises:
            UnknownCandidateError: If either candidate is not in the catalog.
            RatingPersistError: If either candidate could not be stored.
        """
        a = self.catalog.require(candidate_a)
        b = self.catalog.require(candidate_b)

        if a is b:
            return await self._apply_self_vote(a, category)

        before_a = a.ratings.get(category)
        before_b = b.ratings.get(category)
        after_a, after_b = ELO.update_pair(before_a, before_b, outcome, self.k)

        a.ratings.set(category, after_a)
        b.ratings.set(category, after_b)
        a.ratings.recompute_overall()
        b.ratings.recompute_overall()
        a.vote_count += 1
        b.vote_count += 1

        logger.debug(
            f"{category.value}: {a.id} {before_a}->{after_a}, {b.id} {before_b}->{after_b}"
        )

        change = RatingChange(
            category=category,
            candidate_a=a.id,
            candidate_b=b.id,
            before_a=before_a,
            before_b=before_b,
            after_a=after_a,
            after_b=after_b,
            overall_a=a.ratings.overall,
            overall_b=b.ratings.overall,
        )

        await self._persist([a, b])
        return change

    async def _apply_self_vote(self, candidate: Candidate, category: Category) -> RatingChange:
        # A candidate compared with itself cannot gain or lose rating; only
        # the vote is counted.
        rating = candidate.ratings.get(category)
        candidate.vote_count += 1
        logger.debug(f"{category.value}: self-comparison of {candidate.id}, rating unchanged")

        change = RatingChange(
            category=category,
            candidate_a=candidate.id,
            candidate_b=candidate.id,
            before_a=rating,
            before_b=rating,
            after_a=rating,
            after_b=rating,
            overall_a=candidate.ratings.overall,
            overall_b=candidate.ratings.overall,
        )

        await self._persist([candidate])
        return change

    async def _persist(self, candidates: list[Candidate]) -> None:
        results = await asyncio.gather(
            *(
                self.remote.update_candidate_rating(c.id, c.ratings.model_copy(), c.vote_count)
                for c in candidates
            ),
            return_exceptions=True,
        )
        failed = [c.id for c, r in zip(candidates, results) if isinstance(r, BaseException)]
        if failed:
            errors = [str(r) for r in results if isinstance(r, BaseException)]
            logger.error(f"Failed to update ratings in remote store: {'; '.join(errors)}")
            raise RatingPersistError("Failed to save rating changes.", failed)
