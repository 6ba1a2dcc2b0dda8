"""Unit tests for the typed value parsers."""

import logging
from datetime import date

import pytest

from pharmacopoeia.domain.parsers import parse_bool, parse_date, parse_float, parse_int, parse_text
from pharmacopoeia.domain.ports import BuildError, DateFormatError, NumberFormatError, ValueFormatError


class TestParseDate:
    """Test calendar date parsing."""

    def test_default_format(self):
        """Test a well-formed ISO date."""
        assert parse_date("2020-01-15") == date(2020, 1, 15)

    def test_surrounding_whitespace_ignored(self):
        """Test that element text padding does not matter."""
        assert parse_date("\n  2020-01-15  \n") == date(2020, 1, 15)

    @pytest.mark.parametrize("raw", [
        "15-01-2020",
        "2020-1-15",
        "2020-02-30",
        "2020/01/15",
        "",
        "yesterday",
    ])
    def test_malformed_dates_rejected(self, raw):
        """Test that anything not matching the format exactly is rejected."""
        with pytest.raises(DateFormatError) as exc_info:
            parse_date(raw)

        assert exc_info.value.value == raw
        assert exc_info.value.details['format'] == "%Y-%m-%d"

    def test_year_below_1000(self):
        """Test that a zero-padded four-digit year before 1000 is accepted."""
        assert parse_date("0999-01-15") == date(999, 1, 15)

    def test_non_ascii_digits_rejected(self):
        """Test that only ASCII digits count toward the format."""
        with pytest.raises(DateFormatError):
            parse_date("\uff12\uff10\uff12\uff10-01-15")

    def test_custom_format(self):
        """Test a caller-supplied format."""
        assert parse_date("15.01.2020", "%d.%m.%Y") == date(2020, 1, 15)

    def test_custom_format_rejects_default_spelling(self):
        """Test that the format is not guessed."""
        with pytest.raises(DateFormatError):
            parse_date("2020-01-15", "%d.%m.%Y")


class TestParseNumbers:
    """Test integer and floating point parsing."""

    def test_parse_int(self):
        """Test plain and padded integers."""
        assert parse_int("3") == 3
        assert parse_int("  42 ") == 42

    @pytest.mark.parametrize("raw", ["abc", "3.5", "", "1e3", "1_000", "\u0661\u0662"])
    def test_parse_int_rejects_non_integers(self, raw):
        """Test that non-integer text raises NumberFormatError."""
        with pytest.raises(NumberFormatError):
            parse_int(raw)

    def test_parse_int_minimum(self):
        """Test the lower bound."""
        assert parse_int("0", minimum=0) == 0
        with pytest.raises(NumberFormatError) as exc_info:
            parse_int("-1", minimum=0)
        assert exc_info.value.details['minimum'] == 0

    def test_parse_float(self):
        """Test decimal numbers."""
        assert parse_float("9.99") == pytest.approx(9.99)
        assert parse_float("10") == 10.0

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf", "ten", "", "1_000.5", "\u0663.5"])
    def test_parse_float_rejects_non_finite_and_garbage(self, raw):
        """Test that only finite numbers are accepted."""
        with pytest.raises(NumberFormatError):
            parse_float(raw)

    def test_parse_float_minimum(self):
        """Test the lower bound."""
        with pytest.raises(NumberFormatError):
            parse_float("-0.5", minimum=0)


class TestParseBool:
    """Test permissive boolean parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("true", True),
        ("TRUE", True),
        (" True ", True),
        ("false", False),
        ("FALSE", False),
        ("yes", False),
        ("1", False),
        ("", False),
    ])
    def test_parse_bool(self, raw, expected):
        """Test that only a case-insensitive "true" yields True."""
        assert parse_bool(raw) is expected

    def test_unrecognized_token_logged(self, caplog):
        """Test that garbage tokens are logged at debug level."""
        caplog.set_level(logging.DEBUG, logger="pharmacopoeia.domain.parsers")
        assert parse_bool("maybe") is False
        assert "maybe" in caplog.text


class TestParseText:
    """Test text normalization."""

    def test_strips_whitespace(self):
        """Test that surrounding whitespace is removed."""
        assert parse_text("\n   Amoxil\t") == "Amoxil"

    def test_inner_whitespace_kept(self):
        """Test that inner whitespace is left alone."""
        assert parse_text(" every 8 hours ") == "every 8 hours"


class TestErrorHierarchy:
    """Test that parser errors share the value error base."""

    def test_value_errors_are_build_errors(self):
        """Test the exception hierarchy."""
        assert issubclass(DateFormatError, ValueFormatError)
        assert issubclass(NumberFormatError, ValueFormatError)
        assert issubclass(ValueFormatError, BuildError)

    def test_to_details_includes_value_and_path(self):
        """Test that error context flattens into a dictionary."""
        error = NumberFormatError("Not an integer: 'x'", value="x", path="antibiotic[1]/version[1]/pack[1]/quantity")
        details = error.to_details()

        assert details['value'] == "x"
        assert details['path'] == "antibiotic[1]/version[1]/pack[1]/quantity"
