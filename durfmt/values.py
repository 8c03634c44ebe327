#
# Duration Unit Value Resolver
#

# Standard library -----------------------------------------------------------------------------------------------------
import math
from dataclasses import dataclass, field
from typing import Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .duration import Duration, SupportsDuration
from .settings import FormatSettings
from .tokenizer import Token, unit_types
from .units import UnitType


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class UnitValue:
    """
    Numeric state of one unit type of a template.

    Created by resolve_unit_values and updated in place by the rounding passes
    of a single format call.

    Attributes:
        unit_type: The temporal unit.
        raw_value: Remaining duration expressed in this unit.
        whole_value: floor(raw_value), incremented by bubbling.
        decimal_value: Fraction of raw_value, kept only on the smallest unit.
        is_largest: Largest unit of the template.
        is_smallest: Smallest unit of the template.
        token_length: Width of the template token, e.g. 2 for "mm".
        value: Rendered numeric value after precision and rounding.
        formatted_text: Numeral in the user locale.
        canonical_text: Numeral in "en" digits, no grouping, "." separator.
        millisecond_text: Two-digit rendering for an "SS" token, else None.
        significant_digits: Significant-digit budget assigned to this unit, if any.
    """
    unit_type: UnitType
    raw_value: float
    whole_value: int | float
    decimal_value: float
    is_largest: bool = False
    is_smallest: bool = False
    token_length: int = 1
    value: int | float = 0
    formatted_text: str = ""
    canonical_text: str = ""
    millisecond_text: str | None = None
    significant_digits: int | None = None


@dataclass
class ResolvedUnits:
    """
    Unit values of a template with the duration-level flags of the same call.

    Attributes:
        units: One UnitValue per unit type of the template, descending magnitude.
        is_negative: The duration is negative; values are computed on its absolute value.
        is_max_value: The largest unit exceeds max_value.
        is_min_value: The smallest unit total is below min_value.
        force_length: Effective force_length after the template default.
    """
    units: list[UnitValue] = field(default_factory=list)
    is_negative: bool = False
    is_max_value: bool = False
    is_min_value: bool = False
    force_length: bool | None = None

    def find(self, unit_type: UnitType) -> UnitValue | None:
        return next((u for u in self.units if u.unit_type == unit_type), None)


# Methods --------------------------------------------------------------------------------------------------------------

def resolve_unit_values(tokens: Sequence[Token],
                        duration: SupportsDuration,
                        settings: FormatSettings,
                        ) -> ResolvedUnits:
    """
    Split a duration across the unit types present in the template.

    Two running remainders are kept: one in months space for years and months, and
    one in milliseconds space for the other units. The whole value of each unit is
    subtracted from both, so "y M d" and "M d h" decompose consistently. Larger units
    drop their fraction; only the smallest unit keeps decimal_value.

    Invalid durations resolve as zero. The caller's duration is never modified.

    Examples:
        >>> from durfmt.tokenizer import tokenize
        >>> resolved = resolve_unit_values(tokenize("h:mm"), Duration(90, "minutes"), FormatSettings())
        >>> [(u.unit_type.value, u.whole_value) for u in resolved.units]
        [('hours', 1), ('minutes', 30)]
    """
    as_milliseconds = duration.as_unit(UnitType.MILLISECONDS)
    as_months = duration.as_unit(UnitType.MONTHS)

    if not duration.is_valid() or math.isnan(as_milliseconds) or math.isnan(as_months):
        as_milliseconds = 0
        as_months = 0

    resolved = ResolvedUnits(is_negative=as_milliseconds < 0, force_length=settings.force_length)

    remainder = Duration(abs(as_milliseconds), UnitType.MILLISECONDS)
    remainder_months = Duration(abs(as_months), UnitType.MONTHS)

    types = unit_types(list(tokens))
    for index, unit_type in enumerate(types):
        is_largest = index == 0
        is_smallest = index == len(types) - 1

        if unit_type in (UnitType.YEARS, UnitType.MONTHS):
            raw_value = remainder_months.as_unit(unit_type)
        else:
            raw_value = remainder.as_unit(unit_type)

        whole_value = math.floor(raw_value)
        decimal_value = raw_value - whole_value
        token_length = next(t.length for t in tokens if t.unit_type == unit_type)

        if is_largest and settings.max_value and raw_value > settings.max_value:
            resolved.is_max_value = True

        if is_smallest and settings.min_value and abs(duration.as_unit(unit_type)) < settings.min_value:
            resolved.is_min_value = True

        if is_largest and resolved.force_length is None and token_length > 1:
            resolved.force_length = True

        remainder.subtract(whole_value, unit_type)
        remainder_months.subtract(whole_value, unit_type)

        resolved.units.append(UnitValue(
            unit_type=unit_type,
            raw_value=raw_value,
            whole_value=whole_value,
            decimal_value=decimal_value if is_smallest else 0,
            is_largest=is_largest,
            is_smallest=is_smallest,
            token_length=token_length,
        ))

    return resolved
