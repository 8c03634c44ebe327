"""
Locale data for duration templates: token patterns, time-template aliases,
unit label tables and pluralization rules.

Built-in locales: "en" (the fallback for every lookup miss) and "de".
Additional locales are registered on a LocaleRegistry; omitted fields of a
LocaleData inherit the English defaults.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Mapping

# Third-party ----------------------------------------------------------------------------------------------------------
from babel.core import Locale, UnknownLocaleError
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value
from .sentinels import NOT_FOUND, NotFoundType, iffound
from .units import UNIT_CODES, UnitType

PluralKeyRule = Callable[[str, int, float | None], str]


# Methods --------------------------------------------------------------------------------------------------------------

def english_plural_key(code: str, integer: int, decimal: float | None) -> str:
    """
    Plural key for English-style two-form labels.

    Singular only for an integer value of exactly 1 with no fraction part: "1" is
    singular, "1.0" is not.

    Examples:
        >>> english_plural_key("s", 1, None)
        's'
        >>> english_plural_key("s", 1, 0.0)
        'ss'
        >>> english_plural_key("h", 2, None)
        'hh'
    """
    if integer == 1 and decimal is None:
        return code
    return code + code


def cldr_plural_key(locale: str) -> PluralKeyRule:
    """
    Build a plural key rule from the CLDR plural rules shipped with Babel.

    The CLDR category "one" selects the singular label, every other category the
    plural label. Unknown locales fall back to english_plural_key.

    Examples:
        >>> rule = cldr_plural_key("de")
        >>> rule("d", 1, None), rule("d", 1, 0.0), rule("d", 3, None)
        ('d', 'dd', 'dd')
    """
    try:
        plural_form = Locale.parse(locale.replace("-", "_")).plural_form
    except (UnknownLocaleError, ValueError):
        return english_plural_key

    def rule(code: str, integer: int, decimal: float | None) -> str:
        if decimal is None:
            operand = Decimal(integer)
        else:
            operand = Decimal(integer) + Decimal(repr(decimal))
        return code if plural_form(operand) == "one" else code + code

    return rule


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class LabelType:
    """
    A family of unit labels and the template placeholder that auto-localizes it.

    Attributes:
        name: Label table name, e.g. "standard" or "short".
        placeholder: Template text replaced by the pluralized label, e.g. "__".
    """
    name: str
    placeholder: str


# @formatter:off

DEFAULT_TOKEN_PATTERNS: tuple[tuple[UnitType, re.Pattern], ...] = (
    (UnitType.ESCAPE,       re.compile(r"\[(.+?)\]")),
    (UnitType.YEARS,        re.compile(r"\*?[Yy]+")),
    (UnitType.MONTHS,       re.compile(r"\*?M+")),
    (UnitType.WEEKS,        re.compile(r"\*?[Ww]+")),
    (UnitType.DAYS,         re.compile(r"\*?[Dd]+")),
    (UnitType.HOURS,        re.compile(r"\*?[Hh]+")),
    (UnitType.MINUTES,      re.compile(r"\*?m+")),
    (UnitType.SECONDS,      re.compile(r"\*?s+")),
    (UnitType.MILLISECONDS, re.compile(r"\*?S+")),
    (UnitType.GENERAL,      re.compile(r".", re.DOTALL)),
)

ENGLISH_LABELS = frozendict({
    "standard": frozendict({
        "S": "millisecond", "SS": "milliseconds",
        "s": "second",      "ss": "seconds",
        "m": "minute",      "mm": "minutes",
        "h": "hour",        "hh": "hours",
        "d": "day",         "dd": "days",
        "w": "week",        "ww": "weeks",
        "M": "month",       "MM": "months",
        "y": "year",        "yy": "years",
    }),
    "short": frozendict({
        "S": "msec", "SS": "msecs",
        "s": "sec",  "ss": "secs",
        "m": "min",  "mm": "mins",
        "h": "hr",   "hh": "hrs",
        "d": "dy",   "dd": "dys",
        "w": "wk",   "ww": "wks",
        "M": "mo",   "MM": "mos",
        "y": "yr",   "yy": "yrs",
    }),
})

GERMAN_LABELS = frozendict({
    "standard": frozendict({
        "S": "Millisekunde", "SS": "Millisekunden",
        "s": "Sekunde",      "ss": "Sekunden",
        "m": "Minute",       "mm": "Minuten",
        "h": "Stunde",       "hh": "Stunden",
        "d": "Tag",          "dd": "Tage",
        "w": "Woche",        "ww": "Wochen",
        "M": "Monat",        "MM": "Monate",
        "y": "Jahr",         "yy": "Jahre",
    }),
    "short": frozendict({
        "S": "ms",   "SS": "ms",
        "s": "Sek.", "ss": "Sek.",
        "m": "Min.", "mm": "Min.",
        "h": "Std.", "hh": "Std.",
        "d": "Tg.",  "dd": "Tg.",
        "w": "Wo.",  "ww": "Wo.",
        "M": "Mon.", "MM": "Mon.",
        "y": "J.",   "yy": "J.",
    }),
})

DEFAULT_TIME_TEMPLATES = frozendict({
    "HMS": "h:mm:ss",
    "HM": "h:mm",
    "MS": "m:ss",
})

DEFAULT_LABEL_TYPES: tuple[LabelType, ...] = (
    LabelType("standard", "__"),
    LabelType("short", "_"),
)

# @formatter:on


@dataclass(frozen=True)
class LocaleData:
    """
    Duration formatting data for one locale.

    Attributes:
        name: Locale name, e.g. "en" or "de-AT".
        labels: Label tables by label type name; each maps a label key ("s" singular,
            "ss" plural) to its text.
        label_types: Label types in placeholder substitution order. Longer placeholders
            must come first so "__" is not consumed as two "_".
        time_templates: Aliases substituted verbatim before tokenizing; "HMS" is
            written "_HMS_" in a template.
        plural_key: Rule (unit code, integer part, fraction part or None) -> label key.
        token_patterns: Ordered (UnitType, pattern) pairs; the first pattern matching at
            a position wins.
    """
    name: str
    labels: Mapping[str, Mapping[str, str]] = ENGLISH_LABELS
    label_types: tuple[LabelType, ...] = DEFAULT_LABEL_TYPES
    time_templates: Mapping[str, str] = DEFAULT_TIME_TEMPLATES
    plural_key: PluralKeyRule = english_plural_key
    token_patterns: tuple[tuple[UnitType, re.Pattern], ...] = DEFAULT_TOKEN_PATTERNS

    def __post_init__(self):
        """Validate and freeze tables"""
        if not isinstance(self.name, str) or not self.name:
            raise ValueError(f"locale name must be a non-empty str, but got {fmt_value(self.name)}")
        if not callable(self.plural_key):
            raise TypeError(f"plural_key must be callable, but got {fmt_type(self.plural_key)}")

        labels = frozendict({str(k): frozendict(v) for k, v in self.labels.items()})
        object.__setattr__(self, "labels", labels)
        object.__setattr__(self, "time_templates", frozendict(self.time_templates))
        object.__setattr__(self, "label_types", tuple(self.label_types))
        object.__setattr__(self, "token_patterns", tuple(self.token_patterns))

        for label_type in self.label_types:
            if label_type.name not in labels:
                raise ValueError(f"label type {fmt_value(label_type.name)} has no label table")

    def unit_labels(self, unit: UnitType) -> list[tuple[str, str, str]]:
        """
        All labels for a unit as (label type, label key, text) triples.

        Keys are matched on their first character, so "s" collects both "s" and "ss".

        Examples:
            >>> ENGLISH.unit_labels(UnitType.HOURS)[:2]
            [('standard', 'h', 'hour'), ('standard', 'hh', 'hours')]
        """
        code = unit.code
        return [
            (label_type, key, text)
            for label_type, table in self.labels.items()
            for key, text in table.items()
            if key[:1] == code
        ]


ENGLISH = LocaleData("en")
GERMAN = LocaleData("de", labels=GERMAN_LABELS, plural_key=cldr_plural_key("de"))


class LocaleRegistry:
    """
    Registry of LocaleData by name with English fallback.

    Lookups try the exact name, then the language subtag ("de-AT" -> "de"), then
    the fallback locale. Names compare case-insensitively and "_" equals "-".

    Examples:
        >>> registry = LocaleRegistry([ENGLISH])
        >>> registry.get("fr").name
        'en'
    """

    def __init__(self, locales: Iterable[LocaleData] = (), fallback: LocaleData = ENGLISH) -> None:
        if not isinstance(fallback, LocaleData):
            raise TypeError(f"fallback must be LocaleData, but got {fmt_type(fallback)}")
        self._fallback = fallback
        self._locales: dict[str, LocaleData] = {}
        self.register(fallback, replace=True)
        for data in locales:
            self.register(data, replace=True)

    @property
    def fallback(self) -> LocaleData:
        return self._fallback

    def register(self, data: LocaleData, *, replace: bool = False) -> LocaleData:
        """
        Add locale data under its name.

        Raises:
            TypeError: If data is not LocaleData.
            ValueError: If the name is taken and replace is False.
        """
        if not isinstance(data, LocaleData):
            raise TypeError(f"LocaleData expected, but got {fmt_type(data)}")
        key = _locale_key(data.name)
        if not replace and key in self._locales:
            raise ValueError(f"locale {fmt_value(data.name)} already registered")
        self._locales[key] = data
        return data

    def peek(self, name: str) -> LocaleData | NotFoundType:
        """Exact or language-subtag lookup; NOT_FOUND instead of the fallback."""
        key = _locale_key(name)
        data = self._locales.get(key, NOT_FOUND)
        if data is NOT_FOUND and "-" in key:
            data = self._locales.get(key.split("-", 1)[0], NOT_FOUND)
        return data

    def get(self, name: str | None) -> LocaleData:
        """Locale data for name, never raising; misses return the fallback locale."""
        if not isinstance(name, str) or not name:
            return self._fallback
        return iffound(self.peek(name), default=self._fallback)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.peek(name) is not NOT_FOUND

    def __iter__(self):
        return iter(self._locales.values())

    def __len__(self) -> int:
        return len(self._locales)


def _locale_key(name: str) -> str:
    return name.strip().replace("_", "-").lower()


LOCALES = LocaleRegistry([ENGLISH, GERMAN])

# Module Sanity Checks -------------------------------------------------------------------------------------------------

# Every temporal unit needs a singular and plural label in every built-in table.
assert all(
    code in table and code * 2 in table
    for labels in (ENGLISH_LABELS, GERMAN_LABELS)
    for table in labels.values()
    for code in UNIT_CODES.values()
), "label tables must cover every unit code"
