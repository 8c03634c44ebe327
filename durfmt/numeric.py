"""
String-safe number formatting for duration numerals.

The fallback formatter cuts one extra digit from the shortest decimal text of
the number, rounds the digit string half-up and only then groups and pads. It
never rounds in binary floating point, so 3.55 with one fraction digit is "3.6",
not "3.5", and it rounds exactly once, so 0.146 is "0.1", not "0.2".
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
from dataclasses import dataclass
from decimal import Context, Decimal, ROUND_DOWN
from typing import Any, Self

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value
from .settings import FormatConf

# Any finite float fits in this precision
_CUT = Context(prec=400, rounding=ROUND_DOWN)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class NumberFormatOptions:
    """
    Options for rendering one non-negative numeral.

    Attributes:
        minimum_integer_digits: Zero-pad the integer part to this width.
        fraction_digits: Fixed number of fraction digits.
        maximum_significant_digits: Round to this many significant digits and drop
            trailing fraction zeros; fraction_digits and integer padding are then
            ignored by the fallback formatter.
        use_grouping: Group integer digits.
        grouping_sizes: Group sizes consumed from the right, the last size repeating.
        grouping_separator: Separator between digit groups.
        decimal_separator: Separator before the fraction.

    Examples:
        >>> NumberFormatOptions(fraction_digits=2).merge(use_grouping=True).use_grouping
        True
    """
    minimum_integer_digits: int = 1
    fraction_digits: int = 0
    maximum_significant_digits: int | None = None
    use_grouping: bool = False
    grouping_sizes: tuple[int, ...] = FormatConf.GROUPING_SIZES
    grouping_separator: str = FormatConf.GROUPING_SEPARATOR
    decimal_separator: str = FormatConf.DECIMAL_SEPARATOR

    def __post_init__(self):
        for name in ("minimum_integer_digits", "fraction_digits"):
            number = getattr(self, name)
            if isinstance(number, bool) or not isinstance(number, int) or number < 0:
                raise ValueError(f"{name} must be int >= 0, but got {fmt_value(number)}")

        digits = self.maximum_significant_digits
        if digits is not None and (isinstance(digits, bool) or not isinstance(digits, int) or digits < 1):
            raise ValueError(f"maximum_significant_digits must be int >= 1 or None, but got {fmt_value(digits)}")

        sizes = tuple(self.grouping_sizes)
        if not sizes or not all(isinstance(s, int) and s > 0 for s in sizes):
            raise ValueError(f"grouping_sizes must be non-empty positive ints, but got {fmt_value(sizes)}")
        object.__setattr__(self, "grouping_sizes", sizes)

    def merge(self, **overrides: Any) -> Self:
        """New options with the given fields overridden."""
        if not overrides:
            return self
        fields = {name: getattr(self, name) for name in self.__dataclass_fields__}
        fields.update(overrides)
        return type(self)(**fields)

    def native_key(self) -> frozendict:
        """
        The options a locale-aware formatter consumes, as an immutable mapping.

        Separators and grouping sizes come from the locale, so they are not part of the key.
        """
        return frozendict(
            minimum_integer_digits=self.minimum_integer_digits,
            fraction_digits=self.fraction_digits,
            maximum_significant_digits=self.maximum_significant_digits,
            use_grouping=self.use_grouping,
        )


# Methods --------------------------------------------------------------------------------------------------------------

def string_round(digits: str) -> str:
    """
    Round a digit string half-up at its last digit.

    The last digit is zeroed; if it was 5 or more a carry propagates to the left,
    nines wrap to zero and a surviving carry prepends "1". The result keeps the
    zeroed digit, so it is one character longer only on overflow.

    Examples:
        >>> string_round("1235")
        '1240'
        >>> string_round("999")
        '1000'
        >>> string_round("124")
        '120'
    """
    reversed_digits = list(reversed(digits))
    carry = True
    index = 0

    while carry and index < len(reversed_digits):
        if index:
            if reversed_digits[index] == "9":
                reversed_digits[index] = "0"
            else:
                reversed_digits[index] = str(int(reversed_digits[index]) + 1)
                carry = False
        else:
            if int(reversed_digits[index]) < 5:
                carry = False
            reversed_digits[index] = "0"
        index += 1

    if carry:
        reversed_digits.append("1")

    return "".join(reversed(reversed_digits))


def format_number_fallback(number: int | float, options: NumberFormatOptions | None = None) -> str:
    """
    Render a non-negative number without floating-point rounding artifacts.

    Args:
        number: Finite value >= 0.
        options: Formatting options, defaults to NumberFormatOptions().

    Raises:
        TypeError: If number is not int | float.
        ValueError: If number is negative or not finite.

    Examples:
        >>> format_number_fallback(3.55, NumberFormatOptions(fraction_digits=1))
        '3.6'
        >>> format_number_fallback(1234567, NumberFormatOptions(use_grouping=True))
        '1,234,567'
        >>> format_number_fallback(1234567, NumberFormatOptions(use_grouping=True, grouping_sizes=(3, 2)))
        '12,34,567'
        >>> format_number_fallback(0.0123, NumberFormatOptions(maximum_significant_digits=2))
        '0.012'
    """
    options = options or NumberFormatOptions()
    _check_number(number)

    significant = options.maximum_significant_digits
    fraction_digits = options.fraction_digits

    if significant:
        text = cut_precision(number, significant + 1)
    else:
        text = cut_fixed(number, fraction_digits + 1)

    mantissa, _, exponent_text = text.partition("e")
    integer, _, fraction = mantissa.partition(".")

    digits = integer + fraction
    if significant:
        needs_round = len(digits.lstrip("0")) == significant + 1
    else:
        needs_round = len(fraction) == fraction_digits + 1

    if needs_round:
        integer_length = len(integer)
        rounded = string_round(digits)
        if len(rounded) == len(digits) + 1:
            integer_length += 1
        if fraction:
            rounded = rounded[:-1]
        integer, fraction = rounded[:integer_length], rounded[integer_length:]

    if significant:
        fraction = fraction.rstrip("0")

    exponent = int(exponent_text) if exponent_text else 0
    if exponent > 0:
        if len(fraction) <= exponent:
            integer = integer + fraction + "0" * (exponent - len(fraction))
            fraction = ""
        else:
            integer, fraction = integer + fraction[:exponent], fraction[exponent:]
    elif exponent < 0:
        fraction = "0" * (abs(exponent) - len(integer)) + integer + fraction
        integer = "0"

    if not significant:
        fraction = fraction[:fraction_digits].ljust(fraction_digits, "0")
        integer = integer.rjust(options.minimum_integer_digits, "0")

    if options.use_grouping:
        integer = _group(integer, options.grouping_sizes, options.grouping_separator)

    if fraction:
        return integer + options.decimal_separator + fraction
    return integer


def cut_fixed(number: int | float, fraction_digits: int) -> str:
    """
    Fixed-point text of number with `fraction_digits` digits, cut without rounding.

    Digits are taken from the shortest decimal text that round-trips the number,
    so 3.55 keeps its digits "3.55" although its binary value is slightly lower.

    Examples:
        >>> cut_fixed(3.55, 2)
        '3.55'
        >>> cut_fixed(0.146, 2)
        '0.14'
        >>> cut_fixed(7, 1)
        '7.0'
    """
    quantum = Decimal(1).scaleb(-fraction_digits)
    cut = _decimal(number).quantize(quantum, context=_CUT)
    return f"{cut:f}"


def cut_precision(number: int | float, precision: int) -> str:
    """
    Text of number with `precision` significant digits, cut without rounding.

    Uses exponent notation ("1.23e+5") when the decimal exponent is below -6 or
    not below `precision`, positional notation otherwise.

    Examples:
        >>> cut_precision(99.99, 3)
        '99.9'
        >>> cut_precision(123456, 3)
        '1.23e+5'
        >>> cut_precision(0.0001234, 2)
        '0.00012'
    """
    if precision < 1:
        raise ValueError(f"precision must be >= 1, but got {fmt_value(precision)}")

    exact = _decimal(number)
    if exact == 0:
        digits = "0" * precision
        exponent = 0
    else:
        exponent = exact.adjusted()
        cut = exact.quantize(Decimal(1).scaleb(exponent - precision + 1), context=_CUT)
        digits = "".join(map(str, cut.as_tuple().digits)).rjust(precision, "0")[-precision:]

    if exponent < -6 or exponent >= precision:
        mantissa = digits[0] + ("." + digits[1:] if precision > 1 else "")
        sign = "+" if exponent >= 0 else "-"
        return f"{mantissa}e{sign}{abs(exponent)}"

    if exponent >= 0:
        integer, fraction = digits[:exponent + 1], digits[exponent + 1:]
        return integer + ("." + fraction if fraction else "")

    return "0." + "0" * (-exponent - 1) + digits


# Private Methods ------------------------------------------------------------------------------------------------------

def _check_number(number: Any) -> None:
    if isinstance(number, bool) or not isinstance(number, (int, float)):
        raise TypeError(f"number must be int | float, but got {fmt_type(number)}")
    if not math.isfinite(number) or number < 0:
        raise ValueError(f"number must be finite and >= 0, but got {fmt_value(number)}")


def _group(integer: str, sizes: tuple[int, ...], separator: str) -> str:
    """Group digits from the right; the last size repeats once sizes run out."""
    pending = list(sizes)
    groups: list[str] = []
    size = pending[0]
    while integer:
        if pending:
            size = pending.pop(0)
        groups.insert(0, integer[-size:])
        integer = integer[:-size]
    return separator.join(groups)


def _decimal(number: int | float) -> Decimal:
    """Shortest decimal value of a number; floats go through repr()."""
    _check_number(number)
    if isinstance(number, float):
        return Decimal(repr(number))
    return Decimal(number)
