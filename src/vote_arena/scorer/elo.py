"""ELO rating system for candidate rankings.

This module implements the ELO rating system commonly used in chess and other
competitive games. Candidates are rated per category from pairwise votes,
and every rating is kept as an integer.
"""

from __future__ import annotations

from ..models import round_half_away


class ELO:
    """ELO rating system with a fixed K-factor.

    After each vote, both candidates have their rating in the voted category
    adjusted toward the observed outcome.

    Example:
        ```python
        # Equal ratings, A wins
        new_a, new_b = ELO.update_pair(1000, 1000, outcome=0)
        # new_a == 1016, new_b == 984
        ```
    """

    DEFAULT_RATING = 1000
    DEFAULT_K = 32

    @staticmethod
    def expected_score(rating_a: float, rating_b: float) -> float:
        """Calculate expected score for candidate A against candidate B.

        Args:
            rating_a: ELO rating of candidate A.
            rating_b: ELO rating of candidate B.

        Returns:
            Expected score between 0 and 1.

        Example:
            ```python
            ELO.expected_score(1000, 1000)  # 0.5
            ELO.expected_score(1200, 1000)  # ~0.76
            ```
        """
        return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))

    @staticmethod
    def update_pair(
        rating_a: int | float,
        rating_b: int | float,
        outcome: int,
        k: int = DEFAULT_K,
    ) -> tuple[int, int]:
        """Update both ratings after a pairwise vote.

        Each new rating is rounded half away from zero on its own.

        Args:
            rating_a: Current rating of candidate A.
            rating_b: Current rating of candidate B.
            outcome: 0 if A won, 1 if B won.
            k: K-factor determining rating volatility (default 32).

        Returns:
            Tuple of (new_rating_a, new_rating_b).

        Raises:
            ValueError: If outcome is not 0 or 1.
        """
        if outcome not in (0, 1):
            raise ValueError(f"Outcome must be 0 or 1, got {outcome!r}")

        expected_a = ELO.expected_score(rating_a, rating_b)
        expected_b = ELO.expected_score(rating_b, rating_a)

        score_a = 1 if outcome == 0 else 0
        score_b = 1 - score_a

        new_a = round_half_away(rating_a + k * (score_a - expected_a))
        new_b = round_half_away(rating_b + k * (score_b - expected_b))

        return new_a, new_b
