"""Vote validation against the in-memory catalog."""

from __future__ import annotations

from .catalog import Catalog
from .exceptions import InvalidCategoryError, SelfPairingError, UnknownCandidateError
from .models import Category


class VoteValidator:
    """Checks that a prospective vote refers to real candidates and a real category.

    Validation has no side effects.
    """

    def __init__(self, catalog: Catalog, allow_self_pairing: bool = False):
        self.catalog = catalog
        self.allow_self_pairing = allow_self_pairing

    def validate(self, candidate_a: str, candidate_b: str, category: Category | str) -> Category:
        """Validate a vote and return its category.

        The category is checked first, so an invalid category is reported
        whatever the candidates are.

        Raises:
            InvalidCategoryError: If ``category`` is not a voting category.
            UnknownCandidateError: If either candidate is not in the catalog.
            SelfPairingError: If both ids are the same and self-pairing is off.
        """
        parsed = self.parse_category(category)
        if candidate_a not in self.catalog:
            raise UnknownCandidateError(candidate_a, position="A")
        if candidate_b not in self.catalog:
            raise UnknownCandidateError(candidate_b, position="B")
        if candidate_a == candidate_b and not self.allow_self_pairing:
            raise SelfPairingError(candidate_a)
        return parsed

    @staticmethod
    def parse_category(category: Category | str) -> Category:
        """Convert ``category`` to a Category.

        Raises:
            InvalidCategoryError: If it is not one of the voting categories.
        """
        if isinstance(category, Category):
            return category
        try:
            return Category(category)
        except ValueError:
            raise InvalidCategoryError(category, Category.values()) from None
