"""Base interface for error reporting.

The engine reports every recoverable failure here and never depends on the
outcome: reporting is fire-and-forget.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..exceptions import VoteArenaError

DEFAULT_DISMISS_MS = 5000


class ErrorReporter(ABC):
    """Abstract base class for error reporters."""

    @abstractmethod
    def report(
        self,
        title: str,
        detail: str | None = None,
        auto_dismiss_ms: int | None = DEFAULT_DISMISS_MS,
    ) -> None:
        """Surface an error.

        Args:
            title: Short headline.
            detail: Optional explanation.
            auto_dismiss_ms: Delay before the error expires. None keeps it
                until dismissed.
        """
        ...

    def report_exception(self, error: BaseException) -> None:
        """Report an exception using its title and dismiss hint when it has them."""
        if isinstance(error, VoteArenaError):
            self.report(error.title, error.detail, error.auto_dismiss_ms)
        else:
            self.report(type(error).__name__, str(error) or None)
