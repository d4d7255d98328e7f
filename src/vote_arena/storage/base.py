"""Base interface for local key/value storage.

Local storage holds the client-side state that must survive restarts: the
voter identity, the voted-pairs index, and the rate-limit counters. All
values are strings; callers handle their own encoding.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Callable

from ..exceptions import LocalStateCorruptError

Clock = Callable[[], int]


def system_clock() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


class KeyValueStore(ABC):
    """Abstract base class for local storage backends.

    Backends that had to discard unreadable state on open set
    ``load_error`` so the owner can report it.
    """

    load_error: LocalStateCorruptError | None = None

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the value stored under ``key``, or None if absent or expired."""
        ...

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        """Store ``value`` under ``key``.

        Args:
            key: Storage key.
            value: String value.
            ttl_seconds: Optional lifetime. The value never expires when None.
        """
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        ...
