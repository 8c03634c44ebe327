#
# Rounding and Bubbling of Duration Unit Values
#

# Standard library -----------------------------------------------------------------------------------------------------
import math
import re
from dataclasses import dataclass
from decimal import ROUND_DOWN, ROUND_HALF_UP, Context, Decimal
from typing import Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .native import NumberFormatter
from .numeric import NumberFormatOptions, format_number_fallback
from .settings import FormatConf, FormatSettings, Trim
from .units import BUBBLE_RULES, BubbleRule, UnitType
from .values import ResolvedUnits, UnitValue

_EXACT = Context(prec=400)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class _RenderState:
    significant_digits: int
    found_first: bool = False
    bubbled: bool = False


# Methods --------------------------------------------------------------------------------------------------------------

def render_units(resolved: ResolvedUnits,
                 settings: FormatSettings,
                 formatter: NumberFormatter,
                 *,
                 stop_trim: Iterable[UnitType] = (),
                 output_types: Iterable[UnitType] | None = None,
                 bubble_rules: tuple[BubbleRule, ...] = BUBBLE_RULES,
                 ) -> ResolvedUnits:
    """
    Render every unit value, carry overflow into larger units and render again.

    A first pass applies precision, boundary pins and significant digits. If any
    rendered value reaches a bubble threshold, e.g. 59.96 seconds rendered "60.0"
    next to a minutes unit, the source is zeroed, the target incremented and all
    units rendered once more. Bubbling is attempted only once.

    Args:
        resolved: Output of resolve_unit_values; updated in place.
        settings: Format settings.
        formatter: Numeral formatting strategy.
        stop_trim: Unit types exempt from trimming.
        output_types: Unit types forced into the output.
        bubble_rules: Carry rules, in application order.

    Returns:
        The same ResolvedUnits instance.
    """
    stop_trim = frozenset(stop_trim)
    output_types = frozenset(output_types or ())
    state = _RenderState(significant_digits=settings.significant_digits)

    def render_all() -> None:
        for unit in resolved.units:
            _render_unit(unit, state, resolved, settings, formatter, stop_trim, output_types)

    render_all()

    if len(resolved.units) > 1 and bubble(resolved, bubble_rules):
        state.bubbled = True
        state.found_first = False
        state.significant_digits = settings.significant_digits
        render_all()

    return resolved


def bubble(resolved: ResolvedUnits, bubble_rules: tuple[BubbleRule, ...] = BUBBLE_RULES) -> bool:
    """
    Apply every bubble rule whose source and target are both present.

    A rule fires when the integer part of the source's canonical text equals the
    threshold. The target's canonical text is replaced by its new whole value, so
    one carry can trigger the next rule ("60" minutes after a seconds carry).

    Returns:
        True if any rule fired.
    """
    units = {unit.unit_type: unit for unit in resolved.units}
    bubbled = False

    for rule in bubble_rules:
        source = units.get(rule.source)
        target = units.get(rule.target)
        if source is None or target is None:
            continue

        if _parse_int(source.canonical_text) == rule.threshold:
            source.raw_value = 0
            source.whole_value = 0
            source.decimal_value = 0
            target.raw_value += 1
            target.whole_value += 1
            target.decimal_value = 0
            target.canonical_text = _number_text(target.whole_value)
            bubbled = True

    return bubbled


def round_half_up(value: float) -> int:
    """
    Round half toward positive infinity.

    Examples:
        >>> round_half_up(2.5), round_half_up(3.49)
        (3, 3)
    """
    return math.floor(value + 0.5)


def truncate_places(value: int | float, places: int, rounding: str = ROUND_DOWN) -> int | float:
    """
    Quantize `value` to `places` decimal places in decimal arithmetic.

    Floats are read from their shortest repr, so 1.15 cuts to 1.15 and not 1.14.
    Negative places act on integer digits and return an int.

    Examples:
        >>> truncate_places(1.2345, 2)
        1.23
        >>> truncate_places(1.15, 2)
        1.15
        >>> truncate_places(1234, -2, ROUND_HALF_UP)
        1200
    """
    exact = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    quantized = exact.quantize(Decimal(1).scaleb(-places), rounding=rounding, context=_EXACT)
    return int(quantized) if places <= 0 else float(quantized)


# Private Methods ------------------------------------------------------------------------------------------------------

def _render_unit(unit: UnitValue,
                 state: _RenderState,
                 resolved: ResolvedUnits,
                 settings: FormatSettings,
                 formatter: NumberFormatter,
                 stop_trim: frozenset[UnitType],
                 output_types: frozenset[UnitType],
                 ) -> None:
    precision = settings.precision
    use_significant = bool(settings.significant_digits)
    rounding = ROUND_DOWN if settings.truncate else ROUND_HALF_UP

    fraction_digits = 0
    minimum_integer_digits = 1
    significant_digits = None

    if use_significant:
        if state.significant_digits <= 0:
            unit.raw_value = 0
            unit.whole_value = 0
            unit.decimal_value = 0
        else:
            significant_digits = state.significant_digits
            unit.significant_digits = state.significant_digits

    if resolved.is_max_value and not state.bubbled:
        unit.whole_value = settings.max_value if unit.is_largest else 0
        unit.decimal_value = 0

    if resolved.is_min_value and not state.bubbled:
        unit.whole_value = settings.min_value if unit.is_smallest else 0
        unit.decimal_value = 0

    whole_digits = len(_number_text(unit.whole_value))
    budget_exhausted = bool(unit.significant_digits) and unit.significant_digits - whole_digits <= 0

    if unit.is_smallest or budget_exhausted:
        if precision < 0:
            unit.value = truncate_places(unit.whole_value, precision, rounding)
        elif precision == 0:
            unit.value = truncate_places(unit.whole_value + unit.decimal_value, 0, rounding)
        elif use_significant:
            if settings.truncate:
                unit.value = truncate_places(unit.raw_value, state.significant_digits - whole_digits, rounding)
            else:
                unit.value = unit.raw_value
            if unit.whole_value:
                state.significant_digits -= whole_digits
        else:
            fraction_digits = precision
            if settings.truncate:
                unit.value = truncate_places(unit.whole_value + unit.decimal_value, precision)
            else:
                unit.value = unit.whole_value + unit.decimal_value
    elif use_significant and unit.whole_value and unit.significant_digits:
        unit.value = round_half_up(
            truncate_places(unit.whole_value, unit.significant_digits - whole_digits, rounding))
        state.significant_digits -= whole_digits
    else:
        unit.value = unit.whole_value

    if unit.token_length > 1 and (resolved.force_length or state.found_first):
        minimum_integer_digits = unit.token_length
        if state.bubbled and significant_digits is not None and significant_digits < unit.token_length:
            significant_digits = None

    if not state.found_first and (unit.value > 0
                                  or settings.trim == Trim.NONE
                                  or unit.unit_type in stop_trim
                                  or unit.unit_type in output_types):
        state.found_first = True

    options = NumberFormatOptions(
        minimum_integer_digits=minimum_integer_digits,
        fraction_digits=fraction_digits,
        maximum_significant_digits=significant_digits,
        use_grouping=settings.use_grouping,
        grouping_sizes=settings.grouping_sizes,
        grouping_separator=settings.grouping_separator,
        decimal_separator=settings.decimal_separator,
    )
    native = settings.use_native

    unit.formatted_text = formatter.format(unit.value, options, settings.number_locale if native else None)
    unit.canonical_text = formatter.format(
        unit.value,
        options.merge(use_grouping=False, decimal_separator="."),
        FormatConf.CANONICAL_LOCALE if native else None,
    )

    if unit.token_length == 2 and unit.unit_type == UnitType.MILLISECONDS:
        unit.millisecond_text = format_number_fallback(unit.value, NumberFormatOptions(minimum_integer_digits=3))[:2]
    else:
        unit.millisecond_text = None


def _number_text(value: int | float) -> str:
    """Shortest text of a number; integral floats have no ".0"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _parse_int(text: str) -> int | None:
    match = re.match(r"\s*(\d+)", text)
    return int(match.group(1)) if match else None
