"""Error reporter implementations.

- ErrorLog keeps a newest-first list of errors for a UI to display and
  expires them by timestamp.
- LoggingErrorReporter writes every report to the standard logger.
"""

from __future__ import annotations

import logging
import uuid

from ..models import AppError
from ..storage.base import Clock, system_clock
from .base import DEFAULT_DISMISS_MS, ErrorReporter

logger = logging.getLogger(__name__)


class ErrorLog(ErrorReporter):
    """Collects reported errors, newest first.

    Errors with an auto-dismiss delay disappear from :meth:`active` once the
    delay has passed.

    Example:
        ```python
        errors = ErrorLog()
        errors.report("Vote Sync Failed", "Server unreachable")
        for error in errors.active():
            print(error.title)
        ```
    """

    def __init__(self, clock: Clock | None = None, echo: bool = True):
        """Initialize the log.

        Args:
            clock: Millisecond clock used for timestamps.
            echo: Also write each report to the logger.
        """
        self._clock = clock or system_clock
        self._echo = echo
        self.errors: list[AppError] = []

    def report(
        self,
        title: str,
        detail: str | None = None,
        auto_dismiss_ms: int | None = DEFAULT_DISMISS_MS,
    ) -> None:
        error = AppError(
            id=str(uuid.uuid4()),
            title=title,
            detail=detail,
            timestamp=self._clock(),
            auto_dismiss_ms=auto_dismiss_ms,
        )
        self.errors.insert(0, error)
        if self._echo:
            logger.warning(f"{title}: {detail}" if detail else title)

    def active(self) -> list[AppError]:
        """Drop expired errors and return the remaining ones."""
        now = self._clock()
        self.errors = [e for e in self.errors if not e.is_expired(now)]
        return list(self.errors)

    def dismiss(self, error_id: str) -> bool:
        """Remove an error by id. Returns whether it was present."""
        for i, error in enumerate(self.errors):
            if error.id == error_id:
                del self.errors[i]
                return True
        return False

    def clear(self) -> None:
        """Remove all errors."""
        self.errors = []

    def titles(self) -> list[str]:
        """Titles of all stored errors, newest first."""
        return [e.title for e in self.errors]


class LoggingErrorReporter(ErrorReporter):
    """Reports errors to a logger only."""

    def __init__(self, log: logging.Logger | None = None, level: int = logging.WARNING):
        self._logger = log or logger
        self._level = level

    def report(
        self,
        title: str,
        detail: str | None = None,
        auto_dismiss_ms: int | None = DEFAULT_DISMISS_MS,
    ) -> None:
        self._logger.log(self._level, f"{title}: {detail}" if detail else title)
