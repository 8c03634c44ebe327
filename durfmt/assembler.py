#
# Duration Output Assembler
#

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Iterable, Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .settings import FormatConf, FormatSettings, Trim
from .tokenizer import Token
from .units import UnitType
from .values import UnitValue


# Methods --------------------------------------------------------------------------------------------------------------

def assemble(tokens: Sequence[Token],
             units: Sequence[UnitValue],
             settings: FormatSettings,
             *,
             is_negative: bool = False,
             is_max_value: bool = False,
             is_min_value: bool = False,
             stop_trim: Iterable[UnitType] = (),
             output_types: Iterable[UnitType] | None = None,
             ) -> str:
    """
    Join tokens and rendered numerals into the output string.

    Unit tokens without a surviving unit emit nothing. The boundary marker goes
    before the first emitted numeral: "< " when a positive duration is below
    min_value or a negative one beyond max_value, "> " in the opposite cases. A
    negative duration gets one "-" before the first numeral that is non-zero,
    stop-trimmed, an output type, or rendered with trimming off.

    Leading and trailing commas, spaces, colons and periods are stripped.

    Examples:
        >>> assemble([Token(None, "n/a")], [], FormatSettings())
        'n/a'
    """
    by_type = {unit.unit_type: unit for unit in units}
    stop_trim = frozenset(stop_trim)
    output_types = frozenset(output_types or ())
    trim_off = settings.trim == Trim.NONE

    below_marker = (is_negative and is_max_value) or (not is_negative and is_min_value)
    above_marker = (is_negative and is_min_value) or (not is_negative and is_max_value)
    pending_sign = is_negative

    parts: list[str] = []
    for token in tokens:
        if not token.is_unit:
            parts.append(token.text)
            continue

        unit = by_type.get(token.unit_type)
        if unit is None:
            continue

        if settings.use_left_units:
            parts.append(token.text)

        if below_marker:
            parts.append(FormatConf.BELOW_MIN)
        elif above_marker:
            parts.append(FormatConf.ABOVE_MAX)
        below_marker = above_marker = False

        if pending_sign and (unit.value > 0 or trim_off
                             or unit.unit_type in stop_trim or unit.unit_type in output_types):
            parts.append("-")
            pending_sign = False

        if token.unit_type == UnitType.MILLISECONDS and unit.millisecond_text:
            parts.append(unit.millisecond_text)
        else:
            parts.append(unit.formatted_text)

        if not settings.use_left_units:
            parts.append(token.text)

    return "".join(parts).strip(FormatConf.STRIP_CHARS)
