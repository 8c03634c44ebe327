"""
Immutable per-call configuration for duration formatting.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import dataclasses
import math
import re
import warnings
from dataclasses import dataclass
from enum import Flag
from typing import Any, Callable, Iterable, Self

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_sequence, fmt_type, fmt_value
from .tokenizer import parse_unit_types
from .units import UnitType, by_magnitude


# @formatter:off

class FormatConf:
    """
    Default configuration constants for duration formatting.

    Attributes:
        LOCALE: Default label and numeral locale.
        GROUPING_SIZES: Fallback formatter digit grouping; (3,) gives thousands,
            (3, 2) gives the lakh/crore grouping of "en-IN".
        GROUPING_SEPARATOR: Fallback formatter grouping separator.
        DECIMAL_SEPARATOR: Fallback formatter decimal separator.
        BELOW_MIN: Marker rendered before a value pinned to min_value.
        ABOVE_MAX: Marker rendered before a value pinned to max_value.
        STRIP_CHARS: Characters stripped from both ends of the output.
        CANONICAL_LOCALE: Locale of the canonical digits used for bubbling and plurals.

    Examples:
        >>> FormatSettings(grouping_sizes=FormatConf.GROUPING_SIZES_INDIAN)
    """
    LOCALE = "en"
    CANONICAL_LOCALE = "en"

    GROUPING_SIZES = (3,)
    GROUPING_SIZES_INDIAN = (3, 2)
    GROUPING_SEPARATOR = ","
    DECIMAL_SEPARATOR = "."

    BELOW_MIN = "< "
    ABOVE_MAX = "> "

    STRIP_CHARS = ", :."

# @formatter:on


# Classes --------------------------------------------------------------------------------------------------------------

class Trim(Flag):
    """
    Trim policy flags, composable with "|".

    Attributes:
        NONE:  Keep every unit of the template.
        LARGE: Drop leading zero units up to the first non-zero, stop-trim or smallest unit.
        SMALL: Drop trailing zero units up to the first non-zero, stop-trim or largest unit.
        MID:   Drop zero units that are neither first nor last.
        FINAL: Drop a single remaining zero unit, rendering "".
        BOTH:  LARGE | SMALL
        ALL:   LARGE | SMALL | MID | FINAL
    """
    NONE = 0
    LARGE = 1
    SMALL = 2
    MID = 4
    FINAL = 8
    BOTH = LARGE | SMALL
    ALL = LARGE | SMALL | MID | FINAL

    @classmethod
    def parse(cls, value: "Trim | str | bool | Iterable[str] | None") -> "Trim | None":
        """
        Normalize a trim setting.

        Accepts Trim, None (policy decided later, see FormatSettings.resolved_trim),
        bool (True means LARGE, False means NONE), a keyword string separated by
        spaces or commas ("large mid", "both, final"), or a sequence of keywords.
        Legacy keywords "left" and "right" mean LARGE.

        Raises:
            ValueError: On unknown keywords.
            TypeError: On unsupported types.

        Examples:
            >>> Trim.parse("large mid") == Trim.LARGE | Trim.MID
            True
            >>> Trim.parse(False)
            <Trim.NONE: 0>
        """
        if value is None or isinstance(value, Trim):
            return value
        if isinstance(value, bool):
            return cls.LARGE if value else cls.NONE
        if isinstance(value, str):
            words = [w for w in re.split(r"[\s,]+", value) if w]
        elif isinstance(value, abc.Iterable):
            words = []
            for item in value:
                if not isinstance(item, str):
                    raise TypeError(f"trim keywords must be str, but got {fmt_type(item)}")
                words.extend(w for w in re.split(r"[\s,]+", item) if w)
        else:
            raise TypeError(f"trim must be Trim | str | bool | None, but got {fmt_type(value)}")

        trim = cls.NONE
        for word in words:
            keyword = word.lower()
            if keyword in ("left", "right"):
                warnings.warn(f"trim keyword {keyword!r} is deprecated, use 'large'",
                              DeprecationWarning, stacklevel=3)
                keyword = "large"
            if keyword not in _TRIM_KEYWORDS:
                raise ValueError(f"trim keyword expected one of {fmt_sequence(_TRIM_KEYWORDS)}, "
                                 f"but found {fmt_value(word)}")
            trim |= _TRIM_KEYWORDS[keyword]
        return trim


_TRIM_KEYWORDS = {
    "none": Trim.NONE,
    "large": Trim.LARGE,
    "small": Trim.SMALL,
    "both": Trim.BOTH,
    "mid": Trim.MID,
    "final": Trim.FINAL,
    "all": Trim.ALL,
}


Template = str | Callable[["FormatSettings", Any], str] | None


@dataclass(frozen=True)
class FormatSettings:
    """
    Immutable duration formatting settings.

    Every field has an explicit default; derive variants with merge().

    Attributes:
        template: Template string, callable (settings, duration) -> str, or None for a
            template chosen from the duration's largest and smallest components.
        precision: Fraction digits for the smallest unit when positive; integer places
            truncated to zero when negative; the shared significant-digit budget
            when use_significant_digits is set.
        trim: Trim flags, or None to let resolved_trim decide. Accepts anything
            Trim.parse accepts.
        stop_trim: Unit types never trimmed. Accepts a token string ("hh mm"), or a
            sequence of unit names, label codes or UnitType.
        largest: Render only the first N units left after large trimming.
        max_value: Largest unit above this renders as "> max_value".
        min_value: Smallest unit total below this renders as "< min_value".
        truncate: Truncate the smallest unit instead of rounding half-up.
        force_length: Pad the first rendered unit to its token length. None pads
            when the largest template token is longer than one character.
        locale: Locale of unit labels and plural rules.
        user_locale: Locale of numerals, defaults to locale.
        use_plural: Correct singular/plural unit labels found in token text.
        use_left_units: Unit labels precede their numerals ("[hours] h").
        use_grouping: Group integer digits.
        use_significant_digits: Treat precision as significant digits shared across units.
        use_native: Allow the locale-aware native number formatter.
        grouping_sizes: Fallback formatter grouping sizes, consumed from the right.
        grouping_separator: Fallback formatter grouping separator.
        decimal_separator: Fallback formatter decimal separator.
        output_types: Render exactly these unit types, ignoring trim, stop_trim and largest.

    Examples:
        >>> settings = FormatSettings(template="h:mm:ss", trim=False)
        >>> settings.merge(precision=2).precision
        2
    """
    template: Template = None
    precision: int = 0
    trim: Trim | None = None
    stop_trim: frozenset[UnitType] = frozenset()
    largest: int | None = None
    max_value: int | float | None = None
    min_value: int | float | None = None
    truncate: bool = False
    force_length: bool | None = None
    locale: str = FormatConf.LOCALE
    user_locale: str | None = None
    use_plural: bool = True
    use_left_units: bool = False
    use_grouping: bool = True
    use_significant_digits: bool = False
    use_native: bool = True
    grouping_sizes: tuple[int, ...] = FormatConf.GROUPING_SIZES
    grouping_separator: str = FormatConf.GROUPING_SEPARATOR
    decimal_separator: str = FormatConf.DECIMAL_SEPARATOR
    output_types: tuple[UnitType, ...] | None = None

    def __post_init__(self):
        """Validate and normalize fields"""
        if not (self.template is None or isinstance(self.template, str) or callable(self.template)):
            raise TypeError(f"template must be str | Callable | None, but got {fmt_type(self.template)}")

        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise TypeError(f"precision must be int, but got {fmt_type(self.precision)}")

        object.__setattr__(self, "trim", Trim.parse(self.trim))
        object.__setattr__(self, "stop_trim", _parse_stop_trim(self.stop_trim))

        if self.largest is not None:
            if isinstance(self.largest, bool) or not isinstance(self.largest, int):
                raise TypeError(f"largest must be int | None, but got {fmt_type(self.largest)}")
            if self.largest < 0:
                raise ValueError(f"largest must be >= 0, but got {fmt_value(self.largest)}")

        for name in ("max_value", "min_value"):
            boundary = getattr(self, name)
            if boundary is None:
                continue
            if isinstance(boundary, bool) or not isinstance(boundary, (int, float)):
                raise TypeError(f"{name} must be int | float | None, but got {fmt_type(boundary)}")
            if not math.isfinite(boundary) or boundary < 0:
                raise ValueError(f"{name} must be a finite number >= 0, but got {fmt_value(boundary)}")

        for name in ("truncate", "use_plural", "use_left_units", "use_grouping",
                     "use_significant_digits", "use_native"):
            if not isinstance(getattr(self, name), bool):
                raise TypeError(f"{name} must be bool, but got {fmt_type(getattr(self, name))}")

        if not isinstance(self.force_length, (bool, type(None))):
            raise TypeError(f"force_length must be bool | None, but got {fmt_type(self.force_length)}")

        if not isinstance(self.locale, str) or not self.locale:
            raise ValueError(f"locale must be a non-empty str, but got {fmt_value(self.locale)}")
        if not isinstance(self.user_locale, (str, type(None))):
            raise TypeError(f"user_locale must be str | None, but got {fmt_type(self.user_locale)}")

        if not isinstance(self.grouping_sizes, abc.Iterable):
            raise TypeError(f"grouping_sizes must be a sequence of int, but got {fmt_type(self.grouping_sizes)}")
        grouping_sizes = tuple(self.grouping_sizes)
        if not grouping_sizes or not all(isinstance(g, int) and not isinstance(g, bool) and g > 0
                                         for g in grouping_sizes):
            raise ValueError(f"grouping_sizes must be non-empty positive ints, but got {fmt_value(grouping_sizes)}")
        object.__setattr__(self, "grouping_sizes", grouping_sizes)

        for name in ("grouping_separator", "decimal_separator"):
            if not isinstance(getattr(self, name), str):
                raise TypeError(f"{name} must be str, but got {fmt_type(getattr(self, name))}")

        if self.output_types is not None:
            if isinstance(self.output_types, (str, UnitType)) or not isinstance(self.output_types, abc.Iterable):
                raise TypeError(f"output_types must be a sequence of unit types, "
                                f"but got {fmt_type(self.output_types)}")
            output_types = by_magnitude(UnitType.parse(u) for u in self.output_types)
            object.__setattr__(self, "output_types", output_types)

    def merge(self, **overrides: Any) -> Self:
        """
        Create a new FormatSettings instance with the given fields overridden.

        Fields not provided are inherited from the current instance; the new
        instance is validated as a whole.

        Raises:
            TypeError: If an override names no FormatSettings field.

        Examples:
            >>> FormatSettings(precision=1).merge(trim="all").trim
            <Trim.ALL: 15>
        """
        names = {f.name for f in dataclasses.fields(self)}
        unknown = [key for key in overrides if key not in names]
        if unknown:
            raise TypeError(f"unknown FormatSettings field(s): {fmt_sequence(unknown)}")
        if not overrides:
            return self
        return dataclasses.replace(self, **overrides)

    @property
    def number_locale(self) -> str:
        """Locale used to render numerals."""
        return self.user_locale or self.locale

    @property
    def significant_digits(self) -> int:
        """Significant-digit budget, 0 unless use_significant_digits and precision > 0."""
        return self.precision if (self.use_significant_digits and self.precision > 0) else 0

    @property
    def resolved_trim(self) -> Trim:
        """
        Effective trim policy.

        An unset trim becomes ALL when largest, max_value or significant digits are
        in use, LARGE otherwise. A positive largest always implies LARGE.
        """
        trim = self.trim
        if trim is None:
            trim = Trim.ALL if (self.largest or self.max_value or self.significant_digits) else Trim.LARGE
        if self.largest:
            trim |= Trim.LARGE
        return trim


# Methods --------------------------------------------------------------------------------------------------------------

def _parse_stop_trim(value: Any) -> frozenset[UnitType]:
    """
    Normalize stop_trim to a frozenset of temporal unit types.

    Strings are tokenized like templates ("hh *mm" -> hours, minutes); sequences may
    mix template tokens, unit names and UnitType.
    """
    if value is None:
        return frozenset()
    if isinstance(value, UnitType):
        return frozenset(by_magnitude([value]))
    if isinstance(value, str):
        return frozenset(parse_unit_types(value))
    if not isinstance(value, abc.Iterable):
        raise TypeError(f"stop_trim must be str | Iterable | None, but got {fmt_type(value)}")

    units: list[UnitType] = []
    for item in value:
        if isinstance(item, UnitType):
            units.append(item)
        elif isinstance(item, str):
            try:
                units.append(UnitType.parse(item))
            except ValueError:
                units.extend(parse_unit_types(item))
        else:
            raise TypeError(f"stop_trim items must be str | UnitType, but got {fmt_type(item)}")
    return frozenset(by_magnitude(units))
