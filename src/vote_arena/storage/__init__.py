"""Local key/value storage backends.

Provides the persisted client-side state store:
- KeyValueStore: Abstract interface
- InMemoryStorage: Process-lifetime storage for tests
- JsonFileStorage: JSON file with per-key expiry

Example:
    ```python
    from vote_arena.storage import JsonFileStorage

    storage = JsonFileStorage("./state.json")
    storage.set("voter", "abc", ttl_seconds=3600)
    ```
"""

from .base import Clock, KeyValueStore, system_clock
from .file import JsonFileStorage
from .memory import InMemoryStorage

__all__ = [
    "Clock",
    "KeyValueStore",
    "system_clock",
    "InMemoryStorage",
    "JsonFileStorage",
]
