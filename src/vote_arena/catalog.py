"""Candidate catalog.

The catalog is the in-memory list of candidates shared by the rating engine
(which mutates ratings in place) and by readers that sort and display it.
It can be loaded from the remote store or from a bundled YAML file.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from importlib import resources
from pathlib import Path

import yaml
from pydantic import ValidationError

from .exceptions import ConfigError, UnknownCandidateError
from .models import Candidate, Category, RatingKey

logger = logging.getLogger(__name__)

SORT_FIELDS = ("cost_credits", "context_window", "speed", "vote_count")


class Catalog:
    """In-memory candidate catalog.

    Readers always see the latest snapshot; there is no read/write isolation.
    """

    def __init__(self, candidates: Iterable[Candidate] | None = None):
        self._candidates: list[Candidate] = []
        self._index: dict[str, Candidate] = {}
        self.source: str = "empty"
        if candidates is not None:
            self.replace(candidates, source="init")

    def __len__(self) -> int:
        return len(self._candidates)

    def __iter__(self):
        return iter(self._candidates)

    def __contains__(self, candidate_id: object) -> bool:
        return candidate_id in self._index

    @property
    def candidates(self) -> list[Candidate]:
        """The current candidates, in load order."""
        return list(self._candidates)

    def ids(self) -> list[str]:
        """Ids of all candidates, in load order."""
        return [c.id for c in self._candidates]

    def get(self, candidate_id: str) -> Candidate | None:
        """Return the candidate with ``candidate_id``, or None."""
        return self._index.get(candidate_id)

    def require(self, candidate_id: str) -> Candidate:
        """Return the candidate with ``candidate_id``.

        Raises:
            UnknownCandidateError: If no such candidate exists.
        """
        candidate = self._index.get(candidate_id)
        if candidate is None:
            raise UnknownCandidateError(candidate_id)
        return candidate

    def replace(self, candidates: Iterable[Candidate], source: str = "remote") -> None:
        """Swap in a new set of candidates.

        Later duplicates of an id are ignored.
        """
        fresh: list[Candidate] = []
        index: dict[str, Candidate] = {}
        for candidate in candidates:
            if candidate.id in index:
                logger.warning(f"Ignoring duplicate candidate id '{candidate.id}'")
                continue
            index[candidate.id] = candidate
            fresh.append(candidate)
        self._candidates = fresh
        self._index = index
        self.source = source
        logger.debug(f"Catalog replaced with {len(fresh)} candidates from {source}")

    def sorted(self, by: RatingKey | Category | str = RatingKey.OVERALL, descending: bool = True) -> list[Candidate]:
        """Return candidates sorted by a rating or a numeric attribute.

        Args:
            by: A rating key (``overall`` or a category) or one of
                ``cost_credits``, ``context_window``, ``speed``, ``vote_count``.
            descending: Highest first when True.

        Raises:
            ValueError: If ``by`` is not a known sort key.
        """
        if isinstance(by, (RatingKey, Category)):
            key = RatingKey(by.value)
            return sorted(self._candidates, key=lambda c: c.ratings.get(key), reverse=descending)
        if by in SORT_FIELDS:
            return sorted(self._candidates, key=lambda c: getattr(c, by), reverse=descending)
        try:
            key = RatingKey(by)
        except ValueError:
            valid = [k.value for k in RatingKey] + list(SORT_FIELDS)
            raise ValueError(f"Unknown sort key '{by}'. Valid keys: {valid}") from None
        return sorted(self._candidates, key=lambda c: c.ratings.get(key), reverse=descending)

    def by_category(self, key: RatingKey | Category) -> list[Candidate]:
        """Return candidates ranked by one rating, highest first."""
        return self.sorted(key, descending=True)


def load_bundled_catalog(path: str | Path | None = None) -> list[Candidate]:
    """Load the static catalog used when the remote store has none.

    The file is YAML, either a list of candidates or a mapping with a
    ``candidates`` list. Each candidate's ``overall`` rating is recomputed
    from its category ratings.

    Args:
        path: Catalog file. The catalog shipped with the package is used
            when None.

    Returns:
        List of candidates.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ConfigError: If the file is not a valid catalog.
    """
    if path is None:
        text = resources.files("vote_arena").joinpath("data/catalog.yaml").read_text()
        origin = "bundled catalog"
    else:
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Catalog file not found: {path}")
        text = path.read_text()
        origin = str(path)

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {origin}: {e}") from e

    if isinstance(data, dict):
        data = data.get("candidates", [])
    if not isinstance(data, list):
        raise ConfigError(
            f"Invalid catalog in {origin}: expected list, got {type(data).__name__}"
        )

    candidates = []
    for entry in data:
        try:
            candidate = Candidate.model_validate(entry)
        except ValidationError as e:
            raise ConfigError(f"Invalid candidate in {origin}: {e}") from e
        candidate.ratings.recompute_overall()
        candidates.append(candidate)
    return candidates
