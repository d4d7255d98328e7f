"""Error reporting for Vote Arena."""

from .base import DEFAULT_DISMISS_MS, ErrorReporter
from .log import ErrorLog, LoggingErrorReporter

__all__ = [
    "DEFAULT_DISMISS_MS",
    "ErrorReporter",
    "ErrorLog",
    "LoggingErrorReporter",
]
