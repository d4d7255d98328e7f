"""In-memory storage backend.

Keeps values for the lifetime of the process. Useful for tests and for
clients that do not need to persist anything between runs.
"""

from __future__ import annotations

from .base import Clock, KeyValueStore, system_clock


class InMemoryStorage(KeyValueStore):
    """Dictionary-backed key/value store with optional expiry."""

    def __init__(self, clock: Clock | None = None):
        self._clock = clock or system_clock
        self._values: dict[str, tuple[str, int | None]] = {}

    def get(self, key: str) -> str | None:
        entry = self._values.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._values[key]
            return None
        return value

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock() + ttl_seconds * 1000
        self._values[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._values.pop(key, None)

    def keys(self) -> list[str]:
        """Return all keys that have not expired."""
        return [k for k in list(self._values) if self.get(k) is not None]
