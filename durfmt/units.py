#
# Duration Unit Types and Bubble Rules
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from enum import StrEnum, unique
from typing import Iterable

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_sequence, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

# @formatter:off
@unique
class UnitType(StrEnum):
    """
    Token kinds recognized in a duration template.

    Members are declared in tokenizer precedence order: ESCAPE first, the temporal
    units in descending magnitude, GENERAL (any single literal character) last.

    Attributes:
        ESCAPE:       Bracketed literal text, e.g. "[hours]"
        YEARS:        y, yy, Y...
        MONTHS:       M, MM...
        WEEKS:        w, ww, W...
        DAYS:         d, dd, D...
        HOURS:        h, hh, H...
        MINUTES:      m, mm...
        SECONDS:      s, ss...
        MILLISECONDS: S, SS, SSS...
        GENERAL:      Any other character
    """
    ESCAPE = "escape"
    YEARS = "years"
    MONTHS = "months"
    WEEKS = "weeks"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"
    MILLISECONDS = "milliseconds"
    GENERAL = "general"

    @property
    def is_temporal(self) -> bool:
        """True for the eight duration units, False for ESCAPE and GENERAL."""
        return self in MAGNITUDE

    @property
    def code(self) -> str:
        """
        Single-character label code used by locale label tables.

        Raises:
            ValueError: If the unit type is not temporal.
        """
        try:
            return UNIT_CODES[self]
        except KeyError:
            raise ValueError(f"{self.value!r} token kind has no label code") from None

    @property
    def magnitude(self) -> int:
        """Magnitude rank, 0 for years up to 7 for milliseconds."""
        try:
            return MAGNITUDE[self]
        except KeyError:
            raise ValueError(f"{self.value!r} token kind has no magnitude") from None

    @classmethod
    def parse(cls, value: "str | UnitType") -> "UnitType":
        """
        Resolve a unit type from its name ("hours"), singular ("hour") or label code ("h").

        Raises:
            ValueError: If value names no temporal unit.
        """
        if isinstance(value, UnitType):
            return value
        if isinstance(value, str):
            if value in CODE_UNITS:
                return CODE_UNITS[value]
            name = value.strip().lower()
            for unit in TEMPORAL_UNITS:
                if name == unit.value or name == unit.value[:-1]:
                    return unit
        raise ValueError(f"unit type expected one of {fmt_sequence(u.value for u in TEMPORAL_UNITS)}, "
                         f"but found {fmt_value(value)}")
# @formatter:on


@dataclass(frozen=True)
class BubbleRule:
    """
    Carry rule from a smaller unit into a larger one.

    When the rendered integer of `source` equals `threshold` and `target` is present
    in the template, the source is zeroed and the target incremented by one.

    Thresholds are fixed display approximations (a month is 31 days, a year 365 days),
    not calendar arithmetic.
    """
    source: UnitType
    target: UnitType
    threshold: int


# @formatter:off

# Temporal units in descending magnitude
TEMPORAL_UNITS: tuple[UnitType, ...] = (
    UnitType.YEARS,
    UnitType.MONTHS,
    UnitType.WEEKS,
    UnitType.DAYS,
    UnitType.HOURS,
    UnitType.MINUTES,
    UnitType.SECONDS,
    UnitType.MILLISECONDS,
)

MAGNITUDE: dict[UnitType, int] = {unit: rank for rank, unit in enumerate(TEMPORAL_UNITS)}

UNIT_CODES: dict[UnitType, str] = {
    UnitType.YEARS: "y",
    UnitType.MONTHS: "M",
    UnitType.WEEKS: "w",
    UnitType.DAYS: "d",
    UnitType.HOURS: "h",
    UnitType.MINUTES: "m",
    UnitType.SECONDS: "s",
    UnitType.MILLISECONDS: "S",
}

CODE_UNITS: dict[str, UnitType] = {code: unit for unit, code in UNIT_CODES.items()}

# Bubble rules, grouped by source in ascending source magnitude.
BUBBLE_RULES: tuple[BubbleRule, ...] = (
    BubbleRule(UnitType.SECONDS, UnitType.MINUTES, 60),
    BubbleRule(UnitType.SECONDS, UnitType.HOURS, 3_600),
    BubbleRule(UnitType.SECONDS, UnitType.DAYS, 86_400),
    BubbleRule(UnitType.SECONDS, UnitType.WEEKS, 604_800),
    BubbleRule(UnitType.SECONDS, UnitType.MONTHS, 2_678_400),
    BubbleRule(UnitType.SECONDS, UnitType.YEARS, 31_536_000),

    BubbleRule(UnitType.MINUTES, UnitType.HOURS, 60),
    BubbleRule(UnitType.MINUTES, UnitType.DAYS, 1_440),
    BubbleRule(UnitType.MINUTES, UnitType.WEEKS, 10_080),
    BubbleRule(UnitType.MINUTES, UnitType.MONTHS, 44_640),
    BubbleRule(UnitType.MINUTES, UnitType.YEARS, 525_600),

    BubbleRule(UnitType.HOURS, UnitType.DAYS, 24),
    BubbleRule(UnitType.HOURS, UnitType.WEEKS, 168),
    BubbleRule(UnitType.HOURS, UnitType.MONTHS, 744),
    BubbleRule(UnitType.HOURS, UnitType.YEARS, 8_760),

    BubbleRule(UnitType.DAYS, UnitType.WEEKS, 7),
    BubbleRule(UnitType.DAYS, UnitType.MONTHS, 31),
    BubbleRule(UnitType.DAYS, UnitType.YEARS, 365),

    BubbleRule(UnitType.MONTHS, UnitType.YEARS, 12),
)

# @formatter:on


# Methods --------------------------------------------------------------------------------------------------------------

def by_magnitude(units: Iterable[UnitType]) -> tuple[UnitType, ...]:
    """
    Deduplicate temporal unit types and sort them in descending magnitude.

    Non-temporal kinds (ESCAPE, GENERAL) are dropped.

    Examples:
        >>> by_magnitude([UnitType.SECONDS, UnitType.HOURS, UnitType.SECONDS])
        (<UnitType.HOURS: 'hours'>, <UnitType.SECONDS: 'seconds'>)
    """
    return tuple(sorted({u for u in units if u in MAGNITUDE}, key=MAGNITUDE.__getitem__))


# Module Sanity Checks -------------------------------------------------------------------------------------------------

# Every bubble rule must carry from a smaller unit into a larger one.
assert all(r.source.magnitude > r.target.magnitude for r in BUBBLE_RULES), \
    "bubble rules must target a larger unit"
