#
# DURFMT - Numeric Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import math

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from durfmt.numeric import (
    NumberFormatOptions,
    cut_fixed, cut_precision, format_number_fallback, string_round,
)


# Tests ----------------------------------------------------------------------------------------------------------------

class TestStringRound:
    @pytest.mark.parametrize(
        ("digits", "expected"),
        [
            pytest.param("1235", "1240", id="half-up"),
            pytest.param("124", "120", id="down"),
            pytest.param("999", "1000", id="overflow"),
            pytest.param("5", "10", id="single-up"),
            pytest.param("4", "0", id="single-down"),
            pytest.param("0195", "0200", id="leading-zero"),
        ],
    )
    def test_round(self, digits, expected):
        assert string_round(digits) == expected


class TestCut:
    @pytest.mark.parametrize(
        ("number", "digits", "expected"),
        [
            pytest.param(3.55, 2, "3.55", id="shortest-repr"),
            pytest.param(0.146, 2, "0.14", id="cut-not-round"),
            pytest.param(7, 1, "7.0", id="int"),
            pytest.param(0, 0, "0", id="zero"),
            pytest.param(99.99, 1, "99.9", id="nines"),
        ],
    )
    def test_cut_fixed(self, number, digits, expected):
        assert cut_fixed(number, digits) == expected

    @pytest.mark.parametrize(
        ("number", "precision", "expected"),
        [
            pytest.param(99.99, 3, "99.9", id="positional"),
            pytest.param(123456, 3, "1.23e+5", id="exponent"),
            pytest.param(0.0001234, 2, "0.00012", id="small"),
            pytest.param(0.0123, 3, "0.0123", id="leading-zeros"),
            pytest.param(0, 3, "0.00", id="zero"),
        ],
    )
    def test_cut_precision(self, number, precision, expected):
        assert cut_precision(number, precision) == expected

    def test_cut_precision_invalid(self):
        with pytest.raises(ValueError, match="precision must be >= 1"):
            cut_precision(1.5, 0)


class TestFormatNumberFallback:
    @pytest.mark.parametrize(
        ("fraction_digits", "expected"),
        [
            pytest.param(0, "100", id="fd0"),
            pytest.param(1, "100.0", id="fd1"),
            pytest.param(2, "99.99", id="fd2"),
            pytest.param(3, "99.990", id="fd3"),
        ],
    )
    def test_fraction_digits(self, fraction_digits, expected):
        options = NumberFormatOptions(fraction_digits=fraction_digits)
        assert format_number_fallback(99.99, options) == expected

    @pytest.mark.parametrize(
        ("significant", "expected"),
        [
            pytest.param(1, "100", id="sig1"),
            pytest.param(2, "100", id="sig2"),
            pytest.param(3, "100", id="sig3"),
            pytest.param(4, "99.99", id="sig4"),
            pytest.param(5, "99.99", id="sig5"),
        ],
    )
    def test_significant_digits(self, significant, expected):
        options = NumberFormatOptions(maximum_significant_digits=significant)
        assert format_number_fallback(99.99, options) == expected

    @pytest.mark.parametrize(
        ("number", "options", "expected"),
        [
            pytest.param(3.55, NumberFormatOptions(fraction_digits=1), "3.6", id="binary-safe"),
            pytest.param(0.146, NumberFormatOptions(fraction_digits=1), "0.1", id="round-once"),
            pytest.param(0.5, NumberFormatOptions(), "1", id="half-up"),
            pytest.param(0, NumberFormatOptions(), "0", id="zero"),
            pytest.param(5, NumberFormatOptions(minimum_integer_digits=3), "005", id="pad"),
            pytest.param(123456, NumberFormatOptions(maximum_significant_digits=2), "120000", id="sig-large"),
            pytest.param(123456, NumberFormatOptions(maximum_significant_digits=3), "123000", id="sig-large-3"),
            pytest.param(0.0123, NumberFormatOptions(maximum_significant_digits=2), "0.012", id="sig-small"),
            pytest.param(0, NumberFormatOptions(maximum_significant_digits=3), "0", id="sig-zero"),
        ],
    )
    def test_numbers(self, number, options, expected):
        assert format_number_fallback(number, options) == expected

    @pytest.mark.parametrize(
        ("number", "options", "expected"),
        [
            pytest.param(1234567, NumberFormatOptions(use_grouping=True), "1,234,567", id="thousands"),
            pytest.param(1234567, NumberFormatOptions(use_grouping=True, grouping_sizes=(3, 2)), "12,34,567",
                         id="indian"),
            pytest.param(123, NumberFormatOptions(use_grouping=True), "123", id="short"),
            pytest.param(1234567, NumberFormatOptions(), "1234567", id="off"),
            pytest.param(
                1234567.891,
                NumberFormatOptions(fraction_digits=2, use_grouping=True,
                                    grouping_separator=".", decimal_separator=","),
                "1.234.567,89",
                id="separators",
            ),
        ],
    )
    def test_grouping(self, number, options, expected):
        assert format_number_fallback(number, options) == expected

    def test_grouping_digits_recover_value(self):
        text = format_number_fallback(1234567, NumberFormatOptions(use_grouping=True))
        assert int(text.replace(",", "")) == 1234567

    @pytest.mark.parametrize(
        ("number", "error"),
        [
            pytest.param(-1, ValueError, id="negative"),
            pytest.param(math.inf, ValueError, id="inf"),
            pytest.param(math.nan, ValueError, id="nan"),
            pytest.param("1", TypeError, id="str"),
            pytest.param(True, TypeError, id="bool"),
        ],
    )
    def test_invalid_numbers(self, number, error):
        with pytest.raises(error):
            format_number_fallback(number)


class TestNumberFormatOptions:
    @pytest.mark.parametrize(
        "kwargs",
        [
            pytest.param({"fraction_digits": -1}, id="negative-fraction"),
            pytest.param({"minimum_integer_digits": 1.5}, id="float-min-int"),
            pytest.param({"maximum_significant_digits": 0}, id="zero-significant"),
            pytest.param({"grouping_sizes": ()}, id="empty-grouping"),
            pytest.param({"grouping_sizes": (3, -2)}, id="negative-grouping"),
        ],
    )
    def test_validation(self, kwargs):
        with pytest.raises(ValueError):
            NumberFormatOptions(**kwargs)

    def test_merge(self):
        options = NumberFormatOptions(fraction_digits=2)
        merged = options.merge(use_grouping=True)
        assert merged.fraction_digits == 2 and merged.use_grouping
        assert not options.use_grouping
        assert options.merge() is options

    def test_native_key(self):
        """Leave separators out of the key."""
        key = NumberFormatOptions(fraction_digits=1, grouping_separator=".").native_key()
        assert isinstance(key, frozendict)
        assert key == {
            "minimum_integer_digits": 1,
            "fraction_digits": 1,
            "maximum_significant_digits": None,
            "use_grouping": False,
        }
        assert key == NumberFormatOptions(fraction_digits=1).native_key()
