#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from durfmt.native import FormatterCapabilities, NumberFormatCache, NumberFormatter
from durfmt.settings import FormatSettings
from durfmt.tokenizer import tokenize
from durfmt.values import UnitValue


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def fallback_formatter() -> NumberFormatter:
    """Numeral strategy restricted to the string-safe fallback formatter."""
    return NumberFormatter(FormatterCapabilities(), cache=NumberFormatCache())


@pytest.fixture
def native_formatter() -> NumberFormatter:
    """Numeral strategy using Babel directly, with a private cache."""
    return NumberFormatter(
        FormatterCapabilities(native_available=True, native_rounding_correct=True),
        cache=NumberFormatCache(),
    )


@pytest.fixture
def make_unit():
    """Factory for UnitValue instances with rendered text."""

    def _make(unit_type, whole=0, *, raw=None, decimal=0, largest=False, smallest=False, text=None):
        raw = whole + decimal if raw is None else raw
        text = str(whole) if text is None else text
        return UnitValue(
            unit_type=unit_type,
            raw_value=raw,
            whole_value=whole,
            decimal_value=decimal,
            is_largest=largest,
            is_smallest=smallest,
            value=whole,
            formatted_text=text,
            canonical_text=text,
        )

    return _make


@pytest.fixture
def make_tokens():
    """Tokenize a template with default English locale data."""

    def _make(template: str, **kwargs):
        return tokenize(template, **kwargs)

    return _make


@pytest.fixture
def settings() -> FormatSettings:
    return FormatSettings()
