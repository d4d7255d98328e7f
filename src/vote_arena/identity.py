"""Anonymous voter identity."""

from __future__ import annotations

import logging
import uuid

from .storage.base import KeyValueStore

logger = logging.getLogger(__name__)


class IdentityProvider:
    """Issues and persists one opaque identifier per client.

    The identifier is created on first use and kept for as long as the
    client's storage lives. It is never rotated automatically.
    """

    def __init__(self, storage: KeyValueStore, key: str = "vote_arena_voter_id"):
        self.storage = storage
        self.key = key
        self._voter_id: str | None = None

    @property
    def voter_id(self) -> str:
        """The current identifier, created if needed."""
        return self.get_or_create()

    def get_or_create(self) -> str:
        """Return the stored identifier, creating and storing one if absent."""
        if self._voter_id:
            return self._voter_id
        stored = self.storage.get(self.key)
        if stored:
            self._voter_id = stored
            return stored
        self._voter_id = str(uuid.uuid4())
        self.storage.set(self.key, self._voter_id)
        logger.info(f"Created voter identity {self._voter_id}")
        return self._voter_id

    def reset(self) -> str:
        """Discard the current identifier and issue a new one."""
        self.storage.delete(self.key)
        self._voter_id = None
        return self.get_or_create()
