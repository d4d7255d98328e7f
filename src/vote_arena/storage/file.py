"""JSON file storage backend.

Persists every key to a single JSON document::

    {"key": {"value": "...", "expires_at": 1700000000000}}

The file is rewritten on every change. Expired entries are dropped on read.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

from ..exceptions import LocalStateCorruptError
from .base import Clock, KeyValueStore, system_clock

logger = logging.getLogger(__name__)


class JsonFileStorage(KeyValueStore):
    """Key/value store backed by a JSON file.

    Example:
        ```python
        storage = JsonFileStorage("~/.vote_arena/state.json")
        storage.set("voter", "abc")
        ```
    """

    def __init__(self, path: str | Path, clock: Clock | None = None):
        """Open (or create on first write) the storage file.

        An existing file that is not valid JSON is renamed to
        ``<name>.corrupt`` and the store starts empty; the problem is kept
        in :attr:`load_error`.

        Args:
            path: Location of the JSON file.
            clock: Millisecond clock used for expiry.
        """
        self.path = Path(path).expanduser()
        self._clock = clock or system_clock
        self.load_error: LocalStateCorruptError | None = None
        self._values: dict[str, dict] = self._read()

    def _read(self) -> dict[str, dict]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path) as f:
                data = json.load(f)
        except ValueError as e:
            return self._discard(str(e))
        if not isinstance(data, dict):
            return self._discard(f"expected object, got {type(data).__name__}")
        entries = {}
        for key, entry in data.items():
            if isinstance(entry, dict) and isinstance(entry.get("value"), str):
                entries[key] = entry
            else:
                logger.warning(f"Dropping malformed storage entry '{key}'")
        return entries

    def _discard(self, reason: str) -> dict[str, dict]:
        """Set the unreadable file aside and start empty."""
        backup = self.path.with_name(self.path.name + ".corrupt")
        try:
            os.replace(self.path, backup)
            note = f"Moved to {backup.name}, starting empty."
        except OSError as e:
            logger.warning(f"Could not set aside {self.path}: {e}")
            note = "Starting empty; the file will be overwritten."
        self.load_error = LocalStateCorruptError(str(self.path), f"{reason}. {note}")
        logger.error(str(self.load_error))
        return {}

    def _write(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # Write to a sibling file and swap so a crash never leaves half a file
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(self._values, f)
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def get(self, key: str) -> str | None:
        entry = self._values.get(key)
        if entry is None:
            return None
        expires_at = entry.get("expires_at")
        if expires_at is not None and self._clock() >= expires_at:
            del self._values[key]
            self._write()
            return None
        return entry["value"]

    def set(self, key: str, value: str, ttl_seconds: int | None = None) -> None:
        expires_at = None
        if ttl_seconds is not None:
            expires_at = self._clock() + ttl_seconds * 1000
        self._values[key] = {"value": value, "expires_at": expires_at}
        self._write()

    def delete(self, key: str) -> None:
        if self._values.pop(key, None) is not None:
            self._write()
