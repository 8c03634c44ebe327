#
# Trim Policy for Rendered Duration Units
#

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Iterable, Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .settings import FormatSettings, Trim
from .units import UnitType
from .values import UnitValue


# Methods --------------------------------------------------------------------------------------------------------------

def apply_trim(units: Sequence[UnitValue],
               settings: FormatSettings,
               *,
               is_max_value: bool = False,
               stop_trim: Iterable[UnitType] = (),
               output_types: Iterable[UnitType] | None = None,
               ) -> list[UnitValue]:
    """
    Select the units that appear in the output.

    With output_types, exactly those unit types are kept and every other policy is
    bypassed, unless the largest unit was pinned to max_value and no trim was set
    explicitly. Otherwise the policies of settings.resolved_trim apply in order:
    large, the `largest` slice, small, mid, final.

    Applying the same policy to its own result returns an equal list.

    Args:
        units: Rendered units in descending magnitude.
        settings: Trim, largest, min_value and truncate settings.
        is_max_value: The largest unit was pinned to max_value.
        stop_trim: Unit types never trimmed.
        output_types: Unit types to keep; None disables this mode.

    Examples:
        >>> apply_trim([], FormatSettings(trim="all"))
        []
    """
    units = list(units)
    stop_trim = frozenset(stop_trim)

    if output_types is not None and not (is_max_value and not settings.trim):
        wanted = frozenset(output_types)
        return [u for u in units if u.unit_type in wanted]

    trim = settings.resolved_trim

    if Trim.LARGE in trim:
        units = _rest(units, lambda u: not u.is_smallest and not u.whole_value and u.unit_type not in stop_trim)

    if settings.largest and units:
        units = units[:settings.largest]

    if Trim.SMALL in trim and len(units) > 1:
        units = _rest(units[::-1],
                      lambda u: not u.whole_value and u.unit_type not in stop_trim and not u.is_largest)[::-1]

    if Trim.MID in trim:
        last = len(units) - 1
        units = [u for index, u in enumerate(units) if not (0 < index < last and not u.whole_value)]

    if Trim.FINAL in trim and len(units) == 1 and not units[0].whole_value:
        only = units[0]
        below_min = (not settings.truncate and only.is_smallest
                     and settings.min_value is not None and only.raw_value < settings.min_value)
        if not below_min:
            units = []

    return units


# Private Methods ------------------------------------------------------------------------------------------------------

def _rest(units: list[UnitValue], drop) -> list[UnitValue]:
    """Drop leading units while `drop` holds; empty if it holds for all of them."""
    for index, unit in enumerate(units):
        if not drop(unit):
            return units[index:]
    return []
