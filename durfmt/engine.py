"""
Duration formatting entry points.

Formats durations with templates such as "h:mm:ss" or "d __, h __": the
template is tokenized, the duration split across its units, the numerals
rounded with overflow carried into larger units, zero units trimmed, labels
localized and pluralized, and the pieces joined.

Examples:
    >>> format_duration(Duration(3661, "seconds"), template="h:mm:ss")
    '1:01:01'
    >>> format_duration(Duration(59.96, "seconds"), template="m:ss", precision=1)
    '1:00.0'
    >>> format_durations([Duration(1, "hours"), Duration(90, "seconds")], template="h:mm:ss")
    ['1:00:00', '0:01:30']
"""

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt
from dataclasses import dataclass
from typing import Any, Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .assembler import assemble
from .duration import Duration, SupportsDuration, to_duration
from .formatters import fmt_type
from .labels import localize_labels
from .locales import LOCALES, LocaleData, LocaleRegistry
from .native import NumberFormatter
from .rounding import render_units
from .settings import FormatSettings, Trim
from .tokenizer import Token, stop_trim_types, tokenize, unit_types
from .trim import apply_trim
from .units import TEMPORAL_UNITS, UnitType, by_magnitude
from .values import ResolvedUnits, UnitValue, resolve_unit_values

DurationLike = SupportsDuration | dt.timedelta | int | float


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class _Pipeline:
    """Intermediate results of one format call."""
    settings: FormatSettings
    locale_data: LocaleData
    tokens: list[Token]
    resolved: ResolvedUnits
    units: list[UnitValue]
    stop_trim: frozenset[UnitType]


class DurationFormatter:
    """
    Formats durations with fixed settings and collaborators.

    Args:
        settings: Default settings; per-call overrides are merged into them.
        number_formatter: Numeral strategy; defaults to the native/fallback strategy
            probed for this process.
        locales: Locale registry for unit labels and plural rules.

    Examples:
        >>> formatter = DurationFormatter(FormatSettings(template="h [hrs], m [min]"))
        >>> formatter.format(Duration(61, "minutes"))
        '1 hr, 1 min'
    """

    def __init__(self,
                 settings: FormatSettings | None = None,
                 *,
                 number_formatter: NumberFormatter | None = None,
                 locales: LocaleRegistry = LOCALES,
                 ) -> None:
        if settings is not None and not isinstance(settings, FormatSettings):
            raise TypeError(f"settings must be FormatSettings | None, but got {fmt_type(settings)}")
        if not isinstance(locales, LocaleRegistry):
            raise TypeError(f"locales must be LocaleRegistry, but got {fmt_type(locales)}")
        self.settings = settings or FormatSettings()
        self.number_formatter = number_formatter or NumberFormatter()
        self.locales = locales

    def format(self, duration: DurationLike, **overrides: Any) -> str:
        """Render one duration."""
        settings = self.settings.merge(**overrides)
        duration = to_duration(duration)
        template, settings = _resolve_template(duration, settings)
        locale_data = self.locales.get(settings.locale)

        tokens = tokenize(template, locale_data, use_left_units=settings.use_left_units)
        if not unit_types(tokens):
            return "".join(token.text for token in tokens)

        pipeline = self._run(duration, settings, locale_data, tokens)
        localized = localize_labels(pipeline.tokens, pipeline.units, locale_data, use_plural=settings.use_plural)
        return assemble(
            localized,
            pipeline.units,
            settings,
            is_negative=pipeline.resolved.is_negative,
            is_max_value=pipeline.resolved.is_max_value,
            is_min_value=pipeline.resolved.is_min_value,
            stop_trim=pipeline.stop_trim,
            output_types=settings.output_types,
        )

    def resolve(self, duration: DurationLike, **overrides: Any) -> list[UnitValue]:
        """Rendered unit values that survive trimming, without labels or assembly."""
        settings = self.settings.merge(**overrides)
        duration = to_duration(duration)
        template, settings = _resolve_template(duration, settings)
        locale_data = self.locales.get(settings.locale)

        tokens = tokenize(template, locale_data, use_left_units=settings.use_left_units)
        if not unit_types(tokens):
            return []
        return self._run(duration, settings, locale_data, tokens).units

    def format_many(self, durations: Sequence[DurationLike], **overrides: Any) -> list[str]:
        """
        Render several durations with one shared set of unit types.

        A first pass collects the unit types that survive trimming for any of the
        durations; every duration is then rendered with exactly those types, capped
        at `largest` when set.

        Raises:
            TypeError: If durations is not a list or tuple.
        """
        if not isinstance(durations, (list, tuple)):
            raise TypeError(f"durations must be list | tuple, but got {fmt_type(durations)}")
        if not durations:
            return []

        settings = self.settings.merge(**overrides)
        found = [unit.unit_type for duration in durations for unit in self.resolve(duration, **overrides)]
        output_types = by_magnitude(found)
        if settings.largest:
            output_types = output_types[:settings.largest]

        return [self.format(duration, **{**overrides, "output_types": output_types}) for duration in durations]

    def _run(self,
             duration: SupportsDuration,
             settings: FormatSettings,
             locale_data: LocaleData,
             tokens: list[Token],
             ) -> _Pipeline:
        stop_trim = stop_trim_types(tokens)
        if settings.output_types is None:
            stop_trim |= settings.stop_trim

        resolved = resolve_unit_values(tokens, duration, settings)
        render_units(resolved, settings, self.number_formatter,
                     stop_trim=stop_trim, output_types=settings.output_types)
        units = apply_trim(resolved.units, settings,
                           is_max_value=resolved.is_max_value,
                           stop_trim=stop_trim,
                           output_types=settings.output_types)
        return _Pipeline(settings, locale_data, tokens, resolved, units, stop_trim)


# Methods --------------------------------------------------------------------------------------------------------------

def format_duration(duration: DurationLike, settings: FormatSettings | None = None, /, **overrides: Any) -> str:
    """
    Format a duration.

    Args:
        duration: Duration, any SupportsDuration, datetime.timedelta, or milliseconds.
        settings: Base settings, defaults to FormatSettings().
        **overrides: FormatSettings fields overriding `settings`.

    Raises:
        TypeError: For unsupported duration types or unknown settings fields.

    Examples:
        >>> format_duration(dt.timedelta(hours=1, minutes=30), template="h [hours], m [minutes]")
        '1 hour, 30 minutes'
        >>> format_duration(0, template="h:mm", trim="all")
        ''
    """
    return DurationFormatter(settings).format(duration, **overrides)


def format_durations(durations: Sequence[DurationLike],
                     settings: FormatSettings | None = None,
                     /,
                     **overrides: Any,
                     ) -> list[str]:
    """
    Format several durations aligned on the same unit types.

    Raises:
        TypeError: If durations is not a list or tuple.

    Examples:
        >>> format_durations([Duration(2, "hours"), Duration(5, "minutes")], template="h __, m __", trim="all")
        ['2 hours, 0 minutes', '0 hours, 5 minutes']
    """
    if not isinstance(durations, (list, tuple)):
        raise TypeError(f"durations must be list | tuple, but got {fmt_type(durations)}")
    return DurationFormatter(settings).format_many(durations, **overrides)


def resolve_units(duration: DurationLike, settings: FormatSettings | None = None, /, **overrides: Any) -> list[UnitValue]:
    """
    Rendered unit values that would appear in the output of format_duration.

    Examples:
        >>> [u.formatted_text for u in resolve_units(Duration(90, "minutes"), template="h:mm")]
        ['1', '30']
    """
    return DurationFormatter(settings).resolve(duration, **overrides)


def default_template(duration: SupportsDuration) -> tuple[str, Trim | None]:
    """
    Template chosen from the largest and smallest non-zero components of a duration.

    Returns:
        (template, trim) where trim is the policy to use when none was set.

    Examples:
        >>> default_template(Duration(90, "seconds"))
        ('*_MS_', None)
        >>> default_template(Duration(3, "days"))
        ('d __', None)
        >>> default_template(Duration.of(days=3, hours=2))
        ('w __, d __, h __', <Trim.BOTH: 3>)
    """
    components = _components(duration)
    present = [unit for unit in TEMPORAL_UNITS if components.get(unit)]

    if not present:
        return "y __, d __, h __, m __, s __", Trim.BOTH

    first, last = present[0], present[-1]
    single = first == last

    if first == UnitType.MILLISECONDS:
        return "S __", None
    if first in (UnitType.SECONDS, UnitType.MINUTES):
        return "*_MS_", None
    if first == UnitType.HOURS:
        return "_HMS_", None
    if first in (UnitType.DAYS, UnitType.WEEKS):
        if single:
            return ("d __" if first == UnitType.DAYS else "w __"), None
        return "w __, d __, h __", Trim.BOTH
    if single:
        return ("M __" if first == UnitType.MONTHS else "y __"), None
    return "y __, M __, d __", Trim.BOTH


# Private Methods ------------------------------------------------------------------------------------------------------

def _resolve_template(duration: SupportsDuration, settings: FormatSettings) -> tuple[str, FormatSettings]:
    template = settings.template

    if template is None:
        template, trim = default_template(duration)
        if settings.trim is None and trim is not None:
            settings = settings.merge(trim=trim)
        return template, settings

    if callable(template):
        template = template(settings, duration)
        if not isinstance(template, str):
            raise TypeError(f"template callable must return str, but got {fmt_type(template)}")

    return template, settings


def _components(duration: SupportsDuration) -> dict[UnitType, float]:
    components = getattr(duration, "components", None)
    if isinstance(duration, Duration) or callable(components):
        return dict(components())
    return Duration(duration.as_unit(UnitType.MILLISECONDS)).components()
