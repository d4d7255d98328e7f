"""Per-identity voting cadence and hourly quota.

State is held in memory and mirrored to local storage as three numeric
strings. Two processes sharing one identity are not coordinated, so they
can both pass a check before either records; the resulting overshoot is
bounded by the number of concurrent clients.
"""

from __future__ import annotations

import logging

from .config import Config, StorageKeys
from .exceptions import HourlyQuotaExceededError, LocalStateCorruptError, TooFrequentError
from .models import RateLimitState
from .reporter.base import ErrorReporter
from .storage.base import Clock, KeyValueStore, system_clock

logger = logging.getLogger(__name__)


class RateLimiter:
    """Enforces a minimum interval between votes and an hourly vote quota.

    Example:
        ```python
        limiter = RateLimiter(storage, config)
        limiter.load()
        limiter.check_rate_limit()   # raises if the vote must be refused
        ...                          # commit the vote
        limiter.record_success()
        ```
    """

    def __init__(
        self,
        storage: KeyValueStore,
        config: Config | None = None,
        reporter: ErrorReporter | None = None,
        clock: Clock | None = None,
    ):
        config = config or Config()
        self.storage = storage
        self.reporter = reporter
        self.min_interval_ms = config.min_vote_interval_ms
        self.quota = config.hourly_vote_quota
        self.window_ms = config.hourly_window_ms
        self.keys: StorageKeys = config.storage_keys
        self.state = RateLimitState()
        self._clock = clock or system_clock

    def load(self, now: int | None = None) -> RateLimitState:
        """Read persisted counters, resetting an expired window."""
        now = self._clock() if now is None else now
        self.state = RateLimitState(
            last_vote_timestamp=self._read_int(self.keys.last_vote_time),
            hourly_count=self._read_int(self.keys.hourly_vote_count),
            hourly_window_start=self._read_int(self.keys.hourly_window_start),
        )
        if self._window_expired(now):
            logger.debug("Hourly vote window expired while stored, resetting")
            self.state.hourly_count = 0
            self.state.hourly_window_start = now
            self.storage.set(self.keys.hourly_vote_count, "0")
            self.storage.set(self.keys.hourly_window_start, str(now))
        return self.state

    def _read_int(self, key: str) -> int:
        raw = self.storage.get(key)
        if raw is None:
            return 0
        try:
            return int(raw)
        except ValueError:
            error = LocalStateCorruptError(key, f"expected an integer, got {raw!r}")
            logger.warning(str(error))
            if self.reporter:
                self.reporter.report_exception(error)
            self.storage.delete(key)
            return 0

    def _window_expired(self, now: int) -> bool:
        start = self.state.hourly_window_start
        return start > 0 and now - start > self.window_ms

    def check_rate_limit(self, now: int | None = None) -> None:
        """Check whether a vote may be cast at ``now``.

        May start or roll over the hourly window, but never advances the
        vote counters.

        Raises:
            TooFrequentError: If the previous vote was too recent.
            HourlyQuotaExceededError: If the current window's quota is used up.
        """
        now = self._clock() if now is None else now
        last = self.state.last_vote_timestamp
        if last > 0 and now - last < self.min_interval_ms:
            raise TooFrequentError(self.min_interval_ms, now - last)

        if self._window_expired(now):
            self.state.hourly_count = 0
            self.state.hourly_window_start = now
        elif self.state.hourly_window_start == 0:
            self.state.hourly_window_start = now

        if self.state.hourly_count >= self.quota:
            raise HourlyQuotaExceededError(self.quota)

    def record_success(self, now: int | None = None) -> None:
        """Count a committed vote and persist the counters."""
        now = self._clock() if now is None else now
        if self.state.hourly_window_start == 0:
            self.state.hourly_window_start = now
        self.state.last_vote_timestamp = now
        self.state.hourly_count += 1

        self.storage.set(self.keys.last_vote_time, str(self.state.last_vote_timestamp))
        self.storage.set(self.keys.hourly_vote_count, str(self.state.hourly_count))
        self.storage.set(self.keys.hourly_window_start, str(self.state.hourly_window_start))

    def remaining(self, now: int | None = None) -> int:
        """Votes left in the current window."""
        now = self._clock() if now is None else now
        if self._window_expired(now):
            return self.quota
        return max(0, self.quota - self.state.hourly_count)
