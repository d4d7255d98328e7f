"""Custom exceptions for Vote Arena.

Every exception carries a short user-facing ``title`` and an
``auto_dismiss_ms`` hint so that error reporters can surface it without
knowing the concrete type.
"""

from __future__ import annotations


class VoteArenaError(Exception):
    """Base exception for all Vote Arena errors."""

    title: str = "Vote Arena Error"
    auto_dismiss_ms: int | None = 5000

    @property
    def detail(self) -> str:
        """The message passed to the exception."""
        return str(self)


class ConfigError(VoteArenaError):
    """Error in configuration.

    Raised when configuration is invalid or missing required fields.
    """

    title = "Configuration Error"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        full_message = message
        if field:
            full_message = f"Configuration error in '{field}': {message}"
        super().__init__(full_message)


# ---------------------------------------------------------------------------
# Vote validation
# ---------------------------------------------------------------------------


class InvalidVoteError(VoteArenaError):
    """A prospective vote failed validation."""

    title = "Invalid Vote"


class UnknownCandidateError(InvalidVoteError):
    """A candidate id is not present in the current catalog."""

    def __init__(self, candidate_id: str, position: str | None = None):
        self.candidate_id = candidate_id
        self.position = position
        label = f"Candidate {position}" if position else "Candidate"
        super().__init__(f"{label} ID not found: {candidate_id}")


class InvalidCategoryError(InvalidVoteError):
    """The category is not one of the fixed voting categories."""

    def __init__(self, category: object, valid: list[str]):
        self.category = category
        self.valid = valid
        super().__init__(
            f"Invalid category provided: {category}\n"
            f"Valid categories: {', '.join(valid)}"
        )


class InvalidWinnerError(InvalidVoteError):
    """The winner is neither of the two compared candidates."""

    def __init__(self, winner: str, candidate_a: str, candidate_b: str):
        self.winner = winner
        self.candidate_a = candidate_a
        self.candidate_b = candidate_b
        super().__init__(
            f"Winner must be one of the selected candidates "
            f"('{candidate_a}' or '{candidate_b}'), got '{winner}'."
        )


class SelfPairingError(InvalidVoteError):
    """A candidate was paired against itself."""

    def __init__(self, candidate_id: str):
        self.candidate_id = candidate_id
        super().__init__(f"Cannot compare candidate '{candidate_id}' with itself.")


class DuplicateVoteError(InvalidVoteError):
    """The voter already voted on this pair in this category."""

    title = "Already Voted"

    def __init__(self, pair_key: str, category: str):
        self.pair_key = pair_key
        self.category = category
        super().__init__(
            f"You have already voted on '{pair_key}' in category '{category}'."
        )


# ---------------------------------------------------------------------------
# Rate limiting
# ---------------------------------------------------------------------------


class RateLimitError(VoteArenaError):
    """Base class for voting cadence and quota violations."""

    title = "Rate Limit Exceeded"


class TooFrequentError(RateLimitError):
    """A vote arrived too soon after the previous one."""

    auto_dismiss_ms = 3000

    def __init__(self, min_interval_ms: int, elapsed_ms: int):
        self.min_interval_ms = min_interval_ms
        self.elapsed_ms = elapsed_ms
        seconds = min_interval_ms / 1000
        unit = "second" if seconds == 1 else "seconds"
        super().__init__(f"Please wait at least {seconds:g} {unit} between votes.")


class HourlyQuotaExceededError(RateLimitError):
    """The voter has used up the votes allowed in the current window."""

    auto_dismiss_ms = 10000

    def __init__(self, quota: int):
        self.quota = quota
        super().__init__(f"You have reached the maximum of {quota} votes per hour.")


# ---------------------------------------------------------------------------
# Remote store
# ---------------------------------------------------------------------------


class RemoteStoreError(VoteArenaError):
    """Base class for failures of the remote persistence service."""

    title = "Remote Store Error"

    def __init__(self, message: str, operation: str | None = None):
        self.operation = operation
        full_message = message
        if operation:
            full_message = f"Remote '{operation}' failed: {message}"
        super().__init__(full_message)


class RemoteReadError(RemoteStoreError):
    """A read from the remote store failed."""

    title = "Remote Read Failed"


class RemoteWriteError(RemoteStoreError):
    """A write to the remote store failed."""

    title = "Remote Write Failed"


class RatingPersistError(RemoteWriteError):
    """Updated ratings could not be stored remotely.

    The in-memory ratings have already changed and are not rolled back.
    """

    title = "Rating Update Failed"

    def __init__(self, message: str, candidate_ids: list[str]):
        self.candidate_ids = candidate_ids
        super().__init__(
            f"{message}\nAffected candidates: {', '.join(candidate_ids)}",
            operation="update_candidate_rating",
        )


# ---------------------------------------------------------------------------
# Local state
# ---------------------------------------------------------------------------


class LocalStateCorruptError(VoteArenaError):
    """Persisted local state could not be parsed."""

    title = "Local State Error"

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"Could not read stored value '{key}': {message}")
