"""Tests for vote validation."""

import pytest

from vote_arena import (
    Catalog,
    Category,
    InvalidCategoryError,
    SelfPairingError,
    UnknownCandidateError,
    VoteValidator,
)


@pytest.fixture
def validator(alpha, beta) -> VoteValidator:
    return VoteValidator(Catalog([alpha, beta]))


class TestVoteValidator:
    """Tests for VoteValidator.validate."""

    def test_valid_vote(self, validator):
        """A valid vote returns the parsed category."""
        assert validator.validate("alpha", "beta", "planning") is Category.PLANNING

    def test_accepts_enum(self, validator):
        assert validator.validate("alpha", "beta", Category.EXPLAINING) is Category.EXPLAINING

    @pytest.mark.parametrize("category", ["overall", "Planning", "", "speed", None, 3])
    def test_invalid_category(self, validator, category):
        """Anything outside the five categories is refused."""
        with pytest.raises(InvalidCategoryError):
            validator.validate("alpha", "beta", category)

    def test_invalid_category_wins_over_unknown_candidate(self, validator):
        """The category is checked regardless of candidate validity."""
        with pytest.raises(InvalidCategoryError, match="Valid categories"):
            validator.validate("ghost", "phantom", "overall")

    def test_unknown_candidate_a(self, validator):
        with pytest.raises(UnknownCandidateError) as exc_info:
            validator.validate("ghost", "beta", "planning")
        assert exc_info.value.candidate_id == "ghost"
        assert exc_info.value.position == "A"

    def test_unknown_candidate_b(self, validator):
        with pytest.raises(UnknownCandidateError, match="Candidate B ID not found: ghost"):
            validator.validate("alpha", "ghost", "planning")

    def test_self_pairing_rejected_by_default(self, validator):
        with pytest.raises(SelfPairingError):
            validator.validate("alpha", "alpha", "planning")

    def test_self_pairing_allowed_when_enabled(self, alpha):
        validator = VoteValidator(Catalog([alpha]), allow_self_pairing=True)
        assert validator.validate("alpha", "alpha", "agentic") is Category.AGENTIC

    def test_sees_catalog_changes(self, validator, gamma):
        """Validation reads the live catalog."""
        validator.catalog.replace([gamma])
        with pytest.raises(UnknownCandidateError):
            validator.validate("alpha", "gamma", "planning")
