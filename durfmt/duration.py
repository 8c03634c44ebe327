"""
Duration values with separate calendar and fixed-length buckets.

A Duration keeps three independent buckets, the way calendar-aware duration types
usually do: months (years fold into months), days (weeks fold into days) and
milliseconds (hours, minutes and seconds fold into milliseconds). Converting
between buckets uses the average Gregorian year (146097 days per 400 years), so
`as_unit()` answers are consistent but never calendar-exact.
"""

# ## Scope
#
# Duration supports exactly what the formatting engine consumes: unit conversion,
# in-place subtraction and validity. It is NOT a general date arithmetic type.

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
import math
from typing import Protocol, Self, runtime_checkable

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value
from .units import UnitType


@runtime_checkable
class SupportsDuration(Protocol):
    """Protocol for duration values consumed by the formatting engine."""

    def as_unit(self, unit: UnitType) -> float: ...

    def subtract(self, amount: float, unit: UnitType) -> Self: ...

    def is_valid(self) -> bool: ...


# @formatter:off

MS_PER_SECOND = 1_000
MS_PER_MINUTE = 60_000
MS_PER_HOUR = 3_600_000
MS_PER_DAY = 86_400_000
MS_PER_WEEK = 604_800_000

# 400 years have 146097 days and 4800 months
DAYS_PER_400_YEARS = 146_097
MONTHS_PER_400_YEARS = 4_800

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

class Duration:
    """
    Signed span of time with months, days and milliseconds buckets.

    Args:
        value: Amount of `unit`. NaN or infinite amounts produce an invalid duration.
        unit: Unit of `value`, a UnitType or its name/label code ("hours", "h").

    Examples:
        >>> Duration(90, "minutes").as_unit(UnitType.HOURS)
        1.5
        >>> Duration.of(years=1, months=2).as_unit(UnitType.MONTHS)
        14.0
        >>> Duration.from_timedelta(dt.timedelta(seconds=90)).as_unit(UnitType.SECONDS)
        90.0
    """

    __slots__ = ("_months", "_days", "_milliseconds", "_valid")

    def __init__(self, value: int | float = 0, unit: UnitType | str = UnitType.MILLISECONDS) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"duration value must be int | float, but got {fmt_type(value)}")

        self._months: float = 0
        self._days: float = 0
        self._milliseconds: float = 0
        self._valid = math.isfinite(value)

        if self._valid:
            self._add(value, UnitType.parse(unit))

    @classmethod
    def of(cls,
           *,
           years: float = 0,
           months: float = 0,
           weeks: float = 0,
           days: float = 0,
           hours: float = 0,
           minutes: float = 0,
           seconds: float = 0,
           milliseconds: float = 0,
           ) -> Self:
        """
        Build a duration from its parts.

        Examples:
            >>> Duration.of(hours=1, minutes=30).as_unit(UnitType.MINUTES)
            90.0
        """
        duration = cls()
        parts = {
            UnitType.YEARS: years,
            UnitType.MONTHS: months,
            UnitType.WEEKS: weeks,
            UnitType.DAYS: days,
            UnitType.HOURS: hours,
            UnitType.MINUTES: minutes,
            UnitType.SECONDS: seconds,
            UnitType.MILLISECONDS: milliseconds,
        }
        for unit, amount in parts.items():
            if isinstance(amount, bool) or not isinstance(amount, (int, float)):
                raise TypeError(f"{unit.value} must be int | float, but got {fmt_type(amount)}")
            if not math.isfinite(amount):
                duration._valid = False
                continue
            duration._add(amount, unit)
        return duration

    @classmethod
    def from_timedelta(cls, delta: dt.timedelta) -> Self:
        """Convert a datetime.timedelta; days go to the days bucket, the rest to milliseconds."""
        if not isinstance(delta, dt.timedelta):
            raise TypeError(f"timedelta expected, but got {fmt_type(delta)}")
        return cls.of(days=delta.days, seconds=delta.seconds, milliseconds=delta.microseconds / 1000)

    @classmethod
    def invalid(cls) -> Self:
        """An invalid duration; formatting treats it as zero."""
        return cls(math.nan)

    def is_valid(self) -> bool:
        return self._valid

    def as_unit(self, unit: UnitType | str) -> float:
        """
        Total length of the duration expressed in `unit`.

        Months and years read the days and milliseconds buckets through the average
        month length; shorter units read the months bucket through whole days.
        Invalid durations return NaN.
        """
        unit = UnitType.parse(unit)

        if not self._valid:
            return math.nan

        if unit in (UnitType.MONTHS, UnitType.YEARS):
            days = self._days + self._milliseconds / MS_PER_DAY
            months = self._months + _days_to_months(days)
            return months / 12 if unit == UnitType.YEARS else months

        days = self._days + _round_half_up(_months_to_days(self._months))

        if unit == UnitType.WEEKS:
            return days / 7 + self._milliseconds / MS_PER_WEEK
        if unit == UnitType.DAYS:
            return days + self._milliseconds / MS_PER_DAY
        if unit == UnitType.HOURS:
            return days * 24 + self._milliseconds / MS_PER_HOUR
        if unit == UnitType.MINUTES:
            return days * 1_440 + self._milliseconds / MS_PER_MINUTE
        if unit == UnitType.SECONDS:
            return days * 86_400 + self._milliseconds / MS_PER_SECOND
        return math.floor(days * MS_PER_DAY) + self._milliseconds

    def subtract(self, amount: float, unit: UnitType | str) -> Self:
        """Subtract `amount` of `unit` in place and return self."""
        self._add(-amount, UnitType.parse(unit))
        return self

    def components(self) -> dict[UnitType, float]:
        """
        Bubbled components: milliseconds below 1000, seconds and minutes below 60,
        hours below 24, days below a month, months below 12, and whole years.

        Weeks are never produced; days carry directly into months.

        Examples:
            >>> Duration(90, "minutes").components()[UnitType.HOURS]
            1.0
        """
        if not self._valid:
            return {unit: 0 for unit in (UnitType.YEARS, UnitType.MONTHS, UnitType.DAYS, UnitType.HOURS,
                                         UnitType.MINUTES, UnitType.SECONDS, UnitType.MILLISECONDS)}

        milliseconds, days, months = self._milliseconds, self._days, self._months

        # Mixed signs are normalised into milliseconds first
        if not ((milliseconds >= 0 and days >= 0 and months >= 0) or
                (milliseconds <= 0 and days <= 0 and months <= 0)):
            milliseconds += _abs_ceil(_months_to_days(months) + days) * MS_PER_DAY
            days = 0
            months = 0

        data: dict[UnitType, float] = {UnitType.MILLISECONDS: math.fmod(milliseconds, 1000)}

        seconds = _abs_floor(milliseconds / 1000)
        data[UnitType.SECONDS] = math.fmod(seconds, 60)

        minutes = _abs_floor(seconds / 60)
        data[UnitType.MINUTES] = math.fmod(minutes, 60)

        hours = _abs_floor(minutes / 60)
        data[UnitType.HOURS] = math.fmod(hours, 24)

        days += _abs_floor(hours / 24)

        months_from_days = _abs_floor(_days_to_months(days))
        months += months_from_days
        days -= _abs_ceil(_months_to_days(months_from_days))

        years = _abs_floor(months / 12)
        months = math.fmod(months, 12)

        data[UnitType.DAYS] = days
        data[UnitType.MONTHS] = months
        data[UnitType.YEARS] = years
        return data

    def _add(self, amount: float, unit: UnitType) -> None:
        if unit == UnitType.YEARS:
            self._months += amount * 12
        elif unit == UnitType.MONTHS:
            self._months += amount
        elif unit == UnitType.WEEKS:
            self._days += amount * 7
        elif unit == UnitType.DAYS:
            self._days += amount
        elif unit == UnitType.HOURS:
            self._milliseconds += amount * MS_PER_HOUR
        elif unit == UnitType.MINUTES:
            self._milliseconds += amount * MS_PER_MINUTE
        elif unit == UnitType.SECONDS:
            self._milliseconds += amount * MS_PER_SECOND
        else:
            self._milliseconds += amount

    def __repr__(self) -> str:
        if not self._valid:
            return "Duration(<invalid>)"
        return f"Duration(months={self._months!r}, days={self._days!r}, milliseconds={self._milliseconds!r})"


# Methods --------------------------------------------------------------------------------------------------------------

def to_duration(value: "SupportsDuration | dt.timedelta | int | float") -> SupportsDuration:
    """
    Coerce a supported duration-like value.

    Accepts any SupportsDuration implementation, datetime.timedelta, or a number of
    milliseconds. NaN or infinite numbers produce an invalid Duration.

    Raises:
        TypeError: For bool or any other type.
    """
    if isinstance(value, SupportsDuration):
        return value
    if isinstance(value, dt.timedelta):
        return Duration.from_timedelta(value)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return Duration(value, UnitType.MILLISECONDS)
    raise TypeError(f"duration must be Duration | timedelta | int | float, but got {fmt_value(value)}")


def _days_to_months(days: float) -> float:
    return days * MONTHS_PER_400_YEARS / DAYS_PER_400_YEARS


def _months_to_days(months: float) -> float:
    return months * DAYS_PER_400_YEARS / MONTHS_PER_400_YEARS


def _round_half_up(value: float) -> int:
    """Round half toward positive infinity, matching the Duration bucket conversions."""
    return math.floor(value + 0.5)


def _abs_floor(value: float) -> int:
    return math.floor(value) if value >= 0 else math.ceil(value)


def _abs_ceil(value: float) -> int:
    return math.ceil(value) if value >= 0 else math.floor(value)
