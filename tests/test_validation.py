"""Tests for entrant and score validation rules."""

import pytest

from btmm.validation import (
    ValidationError,
    parse_score,
    validate_entrant_count,
    validate_match_score,
    validate_team_index,
)


class TestValidateEntrantCount:
    """Test cases for validate_entrant_count function."""

    def test_valid_counts(self):
        """Test even counts from 4 up."""
        assert validate_entrant_count(4) == (True, "")
        assert validate_entrant_count(8) == (True, "")
        assert validate_entrant_count(26) == (True, "")

    def test_too_few(self):
        """Test fewer than 2 pairs."""
        is_valid, msg = validate_entrant_count(2)
        assert is_valid is False
        assert "At least 4" in msg

        is_valid, msg = validate_entrant_count(0)
        assert is_valid is False

    def test_odd_count(self):
        """Test that one player would be left without a partner."""
        is_valid, msg = validate_entrant_count(9)
        assert is_valid is False
        assert "even" in msg

    def test_three_is_reported_as_too_few(self):
        """Test that the minimum is checked before parity."""
        is_valid, msg = validate_entrant_count(3)
        assert is_valid is False
        assert "At least 4" in msg


class TestParseScore:
    """Test cases for parse_score function."""

    def test_integers_and_strings(self):
        """Test accepted values."""
        assert parse_score(6) == 6
        assert parse_score(0) == 0
        assert parse_score("7") == 7
        assert parse_score(" 3 ") == 3

    def test_empty_clears(self):
        """Test that empty input means no score."""
        assert parse_score(None) is None
        assert parse_score("") is None
        assert parse_score("   ") is None

    def test_rejects_non_numbers(self):
        """Test garbage input."""
        with pytest.raises(ValidationError, match="whole number"):
            parse_score("six")
        with pytest.raises(ValidationError):
            parse_score("6.5")
        with pytest.raises(ValidationError):
            parse_score(True)

    def test_rejects_negative(self):
        """Test negative scores."""
        with pytest.raises(ValidationError, match="negative"):
            parse_score(-1)
        with pytest.raises(ValidationError, match="negative"):
            parse_score("-4")


class TestValidateMatchScore:
    """Test cases for validate_match_score function."""

    def test_valid_results(self):
        """Test complete, non-tied results."""
        assert validate_match_score(6, 4) == (True, "")
        assert validate_match_score(0, 6) == (True, "")
        assert validate_match_score(7, 6) == (True, "")

    def test_partial_scores_are_valid(self):
        """Test that one missing side keeps the match open without error."""
        assert validate_match_score(6, None) == (True, "")
        assert validate_match_score(None, 3) == (True, "")
        assert validate_match_score(None, None) == (True, "")

    def test_ties_rejected(self):
        """Test that equal scores are never a result."""
        is_valid, msg = validate_match_score(5, 5)
        assert is_valid is False
        assert "tie-break" in msg

        is_valid, msg = validate_match_score(0, 0)
        assert is_valid is False

    def test_negative_rejected(self):
        """Test negative values passed in directly."""
        is_valid, msg = validate_match_score(-1, 6)
        assert is_valid is False
        assert "negative" in msg


def test_validate_team_index():
    """Test the side of a match a score belongs to."""
    assert validate_team_index(1) == (True, "")
    assert validate_team_index(2) == (True, "")

    is_valid, msg = validate_team_index(0)
    assert is_valid is False
    assert "1 or 2" in msg
