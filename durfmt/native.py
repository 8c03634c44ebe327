"""
Locale-aware numerals through Babel, with a process-wide formatter cache and a
capability probe deciding whether the native path can be trusted.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import functools
import threading
import warnings
from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_HALF_UP, localcontext

# Third-party ----------------------------------------------------------------------------------------------------------
from babel.core import Locale, UnknownLocaleError
from babel.numbers import NumberPattern, parse_pattern

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value
from .numeric import NumberFormatOptions, format_number_fallback
from .sentinels import NOT_FOUND
from .settings import FormatConf


# Classes --------------------------------------------------------------------------------------------------------------

class NativeNumberFormat:
    """
    A Babel number formatter for one locale and one set of options.

    Digits, separators and grouping sizes follow the locale's CLDR decimal
    format. Rounding is half-up. Significant digits apply to positive values only;
    zero renders with the integer padding alone.

    Unknown locales fall back to "en" with a UserWarning.

    Examples:
        >>> NativeNumberFormat("de", NumberFormatOptions(fraction_digits=1, use_grouping=True)).format(1234.56)
        '1.234,6'
    """

    def __init__(self, locale: str, options: NumberFormatOptions) -> None:
        if not isinstance(options, NumberFormatOptions):
            raise TypeError(f"NumberFormatOptions expected, but got {fmt_type(options)}")
        self.locale = _parse_locale(locale)
        self.options = options
        grouping = self.locale.decimal_formats[None].grouping if options.use_grouping else None
        self._integer_pattern = _integer_pattern(options.minimum_integer_digits, grouping)
        self._fixed_pattern = _pattern(self._integer_pattern + _fraction_pattern("0", options.fraction_digits))

    def format(self, number: int | float) -> str:
        value = Decimal(str(number))
        significant = self.options.maximum_significant_digits

        with localcontext() as ctx:
            ctx.rounding = ROUND_HALF_UP
            if significant and value > 0:
                rounded = Context(prec=significant, rounding=ROUND_HALF_UP).create_decimal(value).normalize()
                places = max(0, -rounded.as_tuple().exponent)
                pattern = _pattern(self._integer_pattern + _fraction_pattern("#", places))
                return pattern.apply(rounded, self.locale)
            return self._fixed_pattern.apply(value, self.locale)

    def __repr__(self) -> str:
        return f"NativeNumberFormat(locale={str(self.locale)!r}, options={self.options!r})"


class NumberFormatCache:
    """
    Process-wide cache of NativeNumberFormat instances.

    Keyed by the locale name and the option items the native formatter consumes.
    Entries are created lazily and never evicted; identical keys return the
    identical instance. Thread-safe.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._formats: dict = {}

    def get_or_create(self, locale: str, options: NumberFormatOptions) -> NativeNumberFormat:
        key = (locale, options.native_key())
        with self._lock:
            number_format = self._formats.get(key, NOT_FOUND)
            if number_format is NOT_FOUND:
                number_format = NativeNumberFormat(locale, options)
                self._formats[key] = number_format
            return number_format

    def clear(self) -> None:
        with self._lock:
            self._formats.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._formats)


@dataclass(frozen=True)
class FormatterCapabilities:
    """
    Whether the native formatter works, and whether it rounds correctly.

    Attributes:
        native_available: Native formatting passes the feature tests.
        native_rounding_correct: 3.55 with one fraction digit renders "3.6".
    """
    native_available: bool = False
    native_rounding_correct: bool = False


class NumberFormatter:
    """
    Numeral formatting strategy.

    Uses the native formatter when it is available and rounds correctly. When it is
    available but rounds incorrectly, the value is first rounded by the fallback
    formatter (no grouping, "." separator) and the result handed to the native
    formatter. Otherwise, or when no locale is given, the fallback formatter is used.

    Args:
        capabilities: Capability flags, defaults to default_capabilities().
        cache: Cache of native formatters, defaults to the module cache.

    Examples:
        >>> NumberFormatter(FormatterCapabilities()).format(1234.5, NumberFormatOptions(use_grouping=True))
        '1,234'
    """

    def __init__(self,
                 capabilities: FormatterCapabilities | None = None,
                 cache: NumberFormatCache | None = None,
                 ) -> None:
        self.cache = cache if cache is not None else DEFAULT_CACHE
        self.capabilities = capabilities if capabilities is not None else default_capabilities()

    def format(self, number: int | float, options: NumberFormatOptions, locale: str | None = None) -> str:
        if locale is None or not self.capabilities.native_available:
            return format_number_fallback(number, options)

        if not self.capabilities.native_rounding_correct:
            plain = options.merge(use_grouping=False, decimal_separator=".")
            number = float(format_number_fallback(number, plain))

        return self.cache.get_or_create(locale, options).format(number)


# Methods --------------------------------------------------------------------------------------------------------------

def probe_capabilities(cache: NumberFormatCache | None = None, locale: str = "en") -> FormatterCapabilities:
    """
    Feature-test the native formatter.

    Checks integer padding, fixed fraction digits, significant digits and grouping
    against known "en" renderings, then the half-up rounding of 3.55. A failing
    check or any exception clears the corresponding flag.
    """
    cache = cache if cache is not None else DEFAULT_CACHE

    def render(number: float, **options) -> str:
        return cache.get_or_create(locale, NumberFormatOptions(**options)).format(number)

    try:
        available = all(render(number, **options) == expected for number, options, expected in _FEATURE_TESTS)
    except Exception:
        available = False

    if not available:
        return FormatterCapabilities()

    try:
        rounding_correct = render(3.55, fraction_digits=1) == "3.6"
    except Exception:
        rounding_correct = False

    return FormatterCapabilities(native_available=True, native_rounding_correct=rounding_correct)


@functools.cache
def default_capabilities() -> FormatterCapabilities:
    """Capabilities of this process, probed once."""
    return probe_capabilities(DEFAULT_CACHE)


# Private Methods ------------------------------------------------------------------------------------------------------

@functools.cache
def _pattern(text: str) -> NumberPattern:
    return parse_pattern(text)


def _parse_locale(name: str) -> Locale:
    if not isinstance(name, str) or not name:
        raise ValueError(f"locale must be a non-empty str, but got {fmt_value(name)}")
    try:
        return Locale.parse(name.replace("-", "_"))
    except (UnknownLocaleError, ValueError):
        warnings.warn(f"unknown numeral locale {name!r}, using {FormatConf.CANONICAL_LOCALE!r}",
                      UserWarning, stacklevel=4)
        return Locale.parse(FormatConf.CANONICAL_LOCALE)


def _integer_pattern(minimum_digits: int, grouping: tuple[int, int] | None) -> str:
    """
    CLDR integer pattern with `minimum_digits` zeros and optional grouping.

    Examples:
        >>> _integer_pattern(2, (3, 3))
        '#,#00'
        >>> _integer_pattern(1, (3, 2))
        '#,##,##0'
    """
    minimum_digits = max(1, minimum_digits)
    if not grouping:
        return "0" * minimum_digits

    primary, secondary = grouping
    width = max(minimum_digits, primary + (secondary if secondary != primary else 0) + 1)
    digits = "#" * (width - minimum_digits) + "0" * minimum_digits

    groups = [digits[-primary:]]
    rest = digits[:-primary]
    if secondary != primary:
        groups.insert(0, rest[-secondary:])
        rest = rest[:-secondary]
    if rest:
        groups.insert(0, rest)
    return ",".join(groups)


def _fraction_pattern(digit: str, places: int) -> str:
    return "." + digit * places if places else ""


# @formatter:off

# (number, NumberFormatOptions fields, expected "en" rendering)
_FEATURE_TESTS = (
    (1,     dict(minimum_integer_digits=1),     "1"),
    (1,     dict(minimum_integer_digits=2),     "01"),
    (1,     dict(minimum_integer_digits=3),     "001"),
    (99.99, dict(fraction_digits=0),            "100"),
    (99.99, dict(fraction_digits=1),            "100.0"),
    (99.99, dict(fraction_digits=2),            "99.99"),
    (99.99, dict(fraction_digits=3),            "99.990"),
    (99.99, dict(maximum_significant_digits=1), "100"),
    (99.99, dict(maximum_significant_digits=2), "100"),
    (99.99, dict(maximum_significant_digits=3), "100"),
    (99.99, dict(maximum_significant_digits=4), "99.99"),
    (99.99, dict(maximum_significant_digits=5), "99.99"),
    (1000,  dict(use_grouping=True),            "1,000"),
    (1000,  dict(use_grouping=False),           "1000"),
)

# @formatter:on

DEFAULT_CACHE = NumberFormatCache()
