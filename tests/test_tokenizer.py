#
# DURFMT - Tokenizer Tests
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from durfmt.tokenizer import Token, parse_unit_types, stop_trim_types, tokenize, unit_types
from durfmt.units import UnitType

H, M, S = UnitType.HOURS, UnitType.MINUTES, UnitType.SECONDS


# Tests ----------------------------------------------------------------------------------------------------------------

class TestTokenize:
    @pytest.mark.parametrize(
        ("template", "expected"),
        [
            pytest.param("h:mm:ss", [Token(H, ":", 1), Token(M, ":", 2), Token(S, "", 2)], id="clock"),
            pytest.param("_HMS_", [Token(H, ":", 1), Token(M, ":", 2), Token(S, "", 2)], id="alias"),
            pytest.param("h [hrs], m", [Token(H, " hrs, ", 1), Token(M, "", 1)], id="escaped-label"),
            pytest.param("[h]h", [Token(None, "h"), Token(H, "", 1)], id="escaped-code"),
            pytest.param("Total: h", [Token(None, "Total: "), Token(H, "", 1)], id="leading-literal"),
            pytest.param("*hh", [Token(H, "", 2, stop_trim=True)], id="stop-trim"),
            pytest.param("h\nm", [Token(H, "\n", 1), Token(M, "", 1)], id="newline"),
            pytest.param("DD YY", [Token(UnitType.DAYS, " ", 2), Token(UnitType.YEARS, "", 2)], id="uppercase"),
            pytest.param("M m", [Token(UnitType.MONTHS, " ", 1), Token(M, "", 1)], id="case-sensitive"),
            pytest.param("[open h", [Token(None, "[open "), Token(H, "", 1)], id="unclosed-bracket"),
            pytest.param("", [], id="empty"),
            pytest.param("n/a", [Token(None, "n/a")], id="no-units"),
        ],
    )
    def test_tokenize(self, template, expected):
        assert tokenize(template) == expected

    def test_left_units(self):
        """Attach literal text to the unit token on its right."""
        tokens = tokenize("[hours] h, [minutes] m", use_left_units=True)
        assert tokens == [Token(H, "hours ", 1), Token(M, ", minutes ", 1)]

    def test_left_units_trailing_literal(self):
        tokens = tokenize("h [left]", use_left_units=True)
        assert tokens == [Token(H, "", 1), Token(None, " left")]

    def test_alias_first_occurrence(self):
        """Substitute only the first occurrence of an alias."""
        tokens = tokenize("_MS_ [_MS_]")
        assert tokens == [Token(M, ":", 1), Token(S, " _MS_", 2)]

    def test_type_error(self):
        with pytest.raises(TypeError, match="template must be str"):
            tokenize(3600)


class TestUnitTypeHelpers:
    def test_parse_unit_types(self):
        assert parse_unit_types("*h mm [s]") == (H, M)

    def test_parse_unit_types_order(self):
        assert parse_unit_types("ss hh mm") == (H, M, S)

    def test_parse_unit_types_type_error(self):
        with pytest.raises(TypeError, match="unit tokens must be str"):
            parse_unit_types(None)

    def test_stop_trim_types(self):
        assert stop_trim_types(tokenize("*h:mm:*ss")) == frozenset({H, S})

    def test_unit_types(self):
        assert unit_types(tokenize("s [sec] m [min] s")) == (M, S)
