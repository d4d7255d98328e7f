"""Scoring module for Vote Arena.

This module provides the ELO rating system and the engine that applies
vote outcomes to the candidate catalog.

Components:
    - ELO: ELO rating formulas with a fixed K-factor
    - RatingEngine: Applies a vote to two candidates and persists the result

Example:
    ```python
    from vote_arena.scorer import ELO

    new_a, new_b = ELO.update_pair(1000, 1000, outcome=0)
    ```
"""

from .elo import ELO
from .engine import RatingEngine

__all__ = [
    "ELO",
    "RatingEngine",
]
