"""Remote store module.

Provides the contract for the authoritative persistence and change
notification service, plus an in-memory implementation:
- RemoteStore: Abstract interface
- InMemoryRemoteStore: Process-local store for testing and offline use

Example:
    ```python
    from vote_arena.remote import get_remote_store

    store = get_remote_store("memory")
    candidates = await store.fetch_candidates()
    ```
"""

from .base import ChangeCallback, RemoteStore, Unsubscribe
from .memory import InMemoryRemoteStore


def get_remote_store(name: str, **kwargs) -> RemoteStore:
    """Factory function to get a remote store by name.

    Args:
        name: Store name. Currently only "memory".
        **kwargs: Additional arguments passed to the store constructor.

    Returns:
        Initialized store instance.

    Raises:
        ValueError: If store name is not recognized.
    """
    stores = {
        "memory": InMemoryRemoteStore,
    }

    if name not in stores:
        valid = list(stores.keys())
        raise ValueError(f"Unknown remote store '{name}'. Valid stores: {valid}")

    return stores[name](**kwargs)


__all__ = [
    "ChangeCallback",
    "RemoteStore",
    "Unsubscribe",
    "InMemoryRemoteStore",
    "get_remote_store",
]
