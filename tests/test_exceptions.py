"""Tests for Vote Arena exceptions."""

from vote_arena import (
    ConfigError,
    DuplicateVoteError,
    HourlyQuotaExceededError,
    InvalidCategoryError,
    InvalidVoteError,
    InvalidWinnerError,
    LocalStateCorruptError,
    RateLimitError,
    RatingPersistError,
    RemoteReadError,
    RemoteStoreError,
    RemoteWriteError,
    SelfPairingError,
    TooFrequentError,
    UnknownCandidateError,
    VoteArenaError,
)


class TestVoteArenaError:
    """Tests for base exception."""

    def test_is_exception(self) -> None:
        error = VoteArenaError("test error")
        assert isinstance(error, Exception)
        assert str(error) == "test error"
        assert error.detail == "test error"
        assert error.auto_dismiss_ms == 5000


class TestHierarchy:
    """Tests for the exception hierarchy."""

    def test_validation_errors(self) -> None:
        for error in (
            UnknownCandidateError("x"),
            InvalidCategoryError("x", ["a"]),
            InvalidWinnerError("c", "a", "b"),
            SelfPairingError("a"),
            DuplicateVoteError("a|b", "planning"),
        ):
            assert isinstance(error, InvalidVoteError)
            assert isinstance(error, VoteArenaError)

    def test_rate_limit_errors(self) -> None:
        assert isinstance(TooFrequentError(1000, 10), RateLimitError)
        assert isinstance(HourlyQuotaExceededError(50), RateLimitError)

    def test_remote_errors(self) -> None:
        assert isinstance(RemoteReadError("x"), RemoteStoreError)
        assert isinstance(RatingPersistError("x", ["a"]), RemoteWriteError)


class TestMessages:
    """Tests for error messages and titles."""

    def test_config_error_with_field(self) -> None:
        error = ConfigError("must be positive", field="hourly_vote_quota")
        assert "hourly_vote_quota" in str(error)
        assert error.field == "hourly_vote_quota"

    def test_unknown_candidate(self) -> None:
        error = UnknownCandidateError("ghost", position="A")
        assert str(error) == "Candidate A ID not found: ghost"
        assert error.title == "Invalid Vote"

    def test_invalid_category_lists_valid(self) -> None:
        error = InvalidCategoryError("overall", ["agentic", "planning"])
        assert "overall" in str(error)
        assert "agentic, planning" in str(error)

    def test_invalid_winner(self) -> None:
        error = InvalidWinnerError("c", "a", "b")
        assert "'a' or 'b'" in str(error)
        assert error.winner == "c"

    def test_too_frequent(self) -> None:
        error = TooFrequentError(1000, 200)
        assert str(error) == "Please wait at least 1 second between votes."
        assert error.title == "Rate Limit Exceeded"
        assert error.auto_dismiss_ms == 3000

    def test_too_frequent_plural(self) -> None:
        assert "2.5 seconds" in str(TooFrequentError(2500, 0))

    def test_hourly_quota(self) -> None:
        error = HourlyQuotaExceededError(50)
        assert str(error) == "You have reached the maximum of 50 votes per hour."
        assert error.auto_dismiss_ms == 10000

    def test_remote_operation(self) -> None:
        error = RemoteWriteError("timeout", operation="insert_vote_record")
        assert str(error) == "Remote 'insert_vote_record' failed: timeout"
        assert error.operation == "insert_vote_record"

    def test_rating_persist(self) -> None:
        error = RatingPersistError("Failed to save rating changes.", ["a", "b"])
        assert "a, b" in str(error)
        assert error.title == "Rating Update Failed"

    def test_local_state_corrupt(self) -> None:
        error = LocalStateCorruptError("votes", "bad json")
        assert "votes" in str(error)
        assert error.key == "votes"
