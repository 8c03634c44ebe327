#
# DURFMT - Engine Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from durfmt.duration import Duration
from durfmt.engine import DurationFormatter, default_template, format_duration, format_durations, resolve_units
from durfmt.settings import FormatSettings, Trim
from durfmt.units import UnitType


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def fmt(fallback_formatter):
    """Format one duration with the fallback numeral formatter."""

    def _format(duration, **overrides):
        return DurationFormatter(number_formatter=fallback_formatter).format(duration, **overrides)

    return _format


# Tests ----------------------------------------------------------------------------------------------------------------

class TestFormatDuration:
    @pytest.mark.parametrize(
        ("duration", "overrides", "expected"),
        [
            pytest.param(Duration(3661, "seconds"), {"template": "h:mm:ss"}, "1:01:01", id="clock"),
            pytest.param(Duration(90000), {"template": "m:ss"}, "1:30", id="milliseconds"),
            pytest.param(Duration(0), {"template": "h:mm", "trim": "all"}, "", id="zero-trim-all"),
            pytest.param(Duration.invalid(), {"template": "h:mm"}, "0", id="invalid"),
            pytest.param(Duration(1, "hours"), {"template": "n/a"}, "n/a", id="no-units"),
            pytest.param(Duration(3599.9, "seconds"), {"template": "h:mm"}, "1:00", id="bubble-minutes"),
            pytest.param(Duration(59.96, "seconds"), {"template": "m:ss", "precision": 1}, "1:00.0",
                         id="bubble-fraction"),
            pytest.param(Duration(1250), {"template": "s.SS"}, "1.25", id="milliseconds-token"),
        ],
    )
    def test_templates(self, fmt, duration, overrides, expected):
        assert fmt(duration, **overrides) == expected

    @pytest.mark.parametrize(
        ("duration", "overrides", "expected"),
        [
            pytest.param(Duration(1, "hours"), {"template": "h [hours]"}, "1 hour", id="singular"),
            pytest.param(Duration(1, "hours"), {"template": "h [hours]", "precision": 1}, "1.0 hours",
                         id="fraction-plural"),
            pytest.param(Duration(2, "hours"), {"template": "h [hour]"}, "2 hours", id="plural"),
            pytest.param(Duration(2, "hours"), {"template": "h [hour]", "use_plural": False}, "2 hour",
                         id="no-plural"),
            pytest.param(Duration(2, "hours"), {"template": "h __"}, "2 hours", id="placeholder"),
            pytest.param(Duration(1, "hours"), {"template": "h _"}, "1 hr", id="short-placeholder"),
            pytest.param(Duration.of(hours=2, minutes=1), {"template": "[hours] h, [minutes] m",
                                                           "use_left_units": True},
                         "hours 2, minute 1", id="left-units"),
        ],
    )
    def test_labels(self, fmt, duration, overrides, expected):
        assert fmt(duration, **overrides) == expected

    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            pytest.param({"template": "s"}, "1,234,567", id="grouping"),
            pytest.param({"template": "s", "use_grouping": False}, "1234567", id="no-grouping"),
            pytest.param({"template": "s", "grouping_sizes": (3, 2)}, "12,34,567", id="indian"),
        ],
    )
    def test_grouping(self, fmt, overrides, expected):
        assert fmt(Duration(1234567, "seconds"), **overrides) == expected

    def test_native_locale(self, native_formatter):
        formatter = DurationFormatter(number_formatter=native_formatter)
        assert formatter.format(Duration(1234567, "seconds"), template="s", user_locale="de") == "1.234.567"

    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            pytest.param(3, "3 Tage", id="plural"),
            pytest.param(1, "1 Tag", id="singular"),
        ],
    )
    def test_german_labels(self, native_formatter, days, expected):
        formatter = DurationFormatter(number_formatter=native_formatter)
        assert formatter.format(Duration(days, "days"), template="d __", locale="de") == expected


class TestTrimming:
    @pytest.mark.parametrize(
        ("overrides", "expected"),
        [
            pytest.param({"template": "h:mm:ss"}, "5:00", id="default-large"),
            pytest.param({"template": "h:mm:ss", "stop_trim": "h"}, "0:05:00", id="stop-trim-setting"),
            pytest.param({"template": "*h:mm:ss"}, "0:05:00", id="stop-trim-marker"),
            pytest.param({"template": "hh:mm:ss"}, "05:00", id="force-length"),
            pytest.param({"template": "h:mm:ss", "trim": False}, "0:05:00", id="trim-off"),
        ],
    )
    def test_five_minutes(self, fmt, overrides, expected):
        assert fmt(Duration(5, "minutes"), **overrides) == expected

    def test_trim_both(self, fmt):
        assert fmt(Duration(2, "hours"), template="h [h] m [m] s [s]", trim="both") == "2 h"

    def test_trim_mid(self, fmt):
        assert fmt(Duration.of(hours=1, seconds=5), template="h:mm:ss", trim="large mid") == "1:05"

    def test_largest(self, fmt):
        duration = Duration.of(days=1, hours=2, minutes=3)
        assert fmt(duration, template="d [days], h [hours], m [minutes]", largest=2) == "1 day, 2 hours"

    def test_output_types(self, fmt):
        text = fmt(Duration(3661, "seconds"), template="h:mm:ss", trim="all", largest=1,
                   output_types=["minutes", "hours"])
        assert text == "1:01"


class TestSignAndBoundaries:
    def test_negative(self, fmt):
        assert fmt(Duration(-90, "seconds"), template="m:ss") == "-1:30"

    @pytest.mark.parametrize(
        ("days", "expected"),
        [
            pytest.param(100, "> 60 days", id="above"),
            pytest.param(-100, "< -60 days", id="negative-beyond"),
            pytest.param(30, "30 days", id="within"),
        ],
    )
    def test_max_value(self, fmt, days, expected):
        assert fmt(Duration(days, "days"), template="d [days]", max_value=60) == expected

    def test_min_value(self, fmt):
        assert fmt(Duration(30, "seconds"), template="m [minutes]", min_value=1) == "< 1 minute"


class TestPrecision:
    def test_truncate(self, fmt):
        assert fmt(Duration(59.96, "seconds"), template="s", precision=1, truncate=True) == "59.9"

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            pytest.param(1.15, "1.15", id="whole-and-fraction"),
            pytest.param(0.29, "0.29", id="fraction-only"),
            pytest.param(2.675, "2.67", id="cut-extra-digit"),
        ],
    )
    def test_truncate_keeps_decimal_digits(self, fmt, seconds, expected):
        """Truncation cuts the decimal digits as written, not their binary approximation."""
        assert fmt(Duration(seconds, "seconds"), template="s", precision=2, truncate=True) == expected

    def test_truncate_significant_digits(self, fmt):
        duration = Duration(1.15, "seconds")
        text = fmt(duration, template="s", precision=3, use_significant_digits=True, truncate=True)
        assert text == "1.15"

    @pytest.mark.parametrize(
        ("use_grouping", "expected"),
        [
            pytest.param(True, "1,200", id="grouping"),
            pytest.param(False, "1200", id="no-grouping"),
        ],
    )
    def test_negative_precision(self, fmt, use_grouping, expected):
        assert fmt(Duration(1234, "seconds"), template="s", precision=-2, use_grouping=use_grouping) == expected

    def test_significant_digits(self, fmt):
        assert fmt(Duration(1.23456, "seconds"), template="s", precision=3, use_significant_digits=True) == "1.23"

    def test_significant_digits_across_units(self, fmt):
        duration = Duration.of(hours=6, minutes=37, seconds=30)
        text = fmt(duration, template="h [hrs], m [mins]", precision=3, use_significant_digits=True)
        assert text == "6 hrs, 38 mins"


class TestDefaultTemplate:
    @pytest.mark.parametrize(
        ("duration", "expected"),
        [
            pytest.param(Duration(500), ("S __", None), id="milliseconds"),
            pytest.param(Duration(90, "seconds"), ("*_MS_", None), id="seconds"),
            pytest.param(Duration(5, "minutes"), ("*_MS_", None), id="minutes"),
            pytest.param(Duration.of(hours=1, minutes=30), ("_HMS_", None), id="hours"),
            pytest.param(Duration(3, "days"), ("d __", None), id="days"),
            pytest.param(Duration.of(days=3, hours=2), ("w __, d __, h __", Trim.BOTH), id="days-hours"),
            pytest.param(Duration.of(months=2), ("M __", None), id="months"),
            pytest.param(Duration.of(years=1), ("y __", None), id="years"),
            pytest.param(Duration.of(years=1, days=3), ("y __, M __, d __", Trim.BOTH), id="years-days"),
            pytest.param(Duration(0), ("y __, d __, h __, m __, s __", Trim.BOTH), id="zero"),
        ],
    )
    def test_choice(self, duration, expected):
        assert default_template(duration) == expected

    @pytest.mark.parametrize(
        ("duration", "expected"),
        [
            pytest.param(Duration(90, "seconds"), "1:30", id="seconds"),
            pytest.param(Duration(30, "seconds"), "0:30", id="stop-trim-minutes"),
            pytest.param(Duration(3, "days"), "3 days", id="days"),
            pytest.param(Duration(0), "0 seconds", id="zero"),
            pytest.param(Duration.of(hours=1, minutes=30), "1:30:00", id="hours"),
        ],
    )
    def test_format(self, fmt, duration, expected):
        assert fmt(duration) == expected


class TestInputs:
    def test_timedelta(self, fmt):
        text = fmt(dt.timedelta(hours=1, minutes=30), template="h [hours], m [minutes]")
        assert text == "1 hour, 30 minutes"

    def test_number_is_milliseconds(self, fmt):
        assert fmt(90000, template="m:ss") == "1:30"

    def test_duration_unchanged(self, fmt):
        duration = Duration(3661, "seconds")
        fmt(duration, template="h:mm:ss")
        assert duration.as_unit(UnitType.SECONDS) == 3661

    def test_callable_template(self, fmt):
        def template(settings, duration):
            return "h:mm" if duration.as_unit(UnitType.HOURS) >= 1 else "m [minutes]"

        assert fmt(Duration(90, "minutes"), template=template) == "1:30"
        assert fmt(Duration(5, "minutes"), template=template) == "5 minutes"

    def test_callable_template_type_error(self, fmt):
        with pytest.raises(TypeError, match="template callable must return str"):
            fmt(Duration(5, "minutes"), template=lambda settings, duration: 42)

    def test_unsupported_duration(self, fmt):
        with pytest.raises(TypeError):
            fmt("90s", template="m:ss")

    def test_unknown_override(self, fmt):
        with pytest.raises(TypeError, match="unknown FormatSettings field"):
            fmt(Duration(1), templat="h")

    def test_settings_type_error(self):
        with pytest.raises(TypeError, match="settings must be FormatSettings"):
            DurationFormatter({"template": "h"})

    def test_module_function(self):
        settings = FormatSettings(template="h [hours], m [minutes]")
        assert format_duration(dt.timedelta(minutes=61), settings) == "1 hour, 1 minute"
        assert format_duration(dt.timedelta(minutes=61), settings, template="m:ss") == "61:00"


class TestFormatMany:
    def test_aligned_units(self, fallback_formatter):
        formatter = DurationFormatter(FormatSettings(template="h __, m __", trim="all"),
                                      number_formatter=fallback_formatter)
        texts = formatter.format_many([Duration(2, "hours"), Duration(5, "minutes")])
        assert texts == ["2 hours, 0 minutes", "0 hours, 5 minutes"]

    def test_largest(self, fallback_formatter):
        formatter = DurationFormatter(number_formatter=fallback_formatter)
        texts = formatter.format_many(
            [Duration.of(hours=2, minutes=5), Duration.of(minutes=5, seconds=3)],
            template="h [h], m [m], s [s]", trim="all", largest=1,
        )
        assert texts == ["2 h", "0 h"]

    def test_empty(self):
        assert format_durations([]) == []

    @pytest.mark.parametrize(
        "durations",
        [
            pytest.param({Duration(1)}, id="set"),
            pytest.param(Duration(1), id="single"),
            pytest.param((d for d in [Duration(1)]), id="generator"),
        ],
    )
    def test_type_error(self, durations):
        with pytest.raises(TypeError, match="durations must be list"):
            format_durations(durations)


class TestResolveUnits:
    def test_surviving_units(self):
        units = resolve_units(Duration(5, "minutes"), template="h:mm:ss")
        assert [u.unit_type for u in units] == [UnitType.MINUTES, UnitType.SECONDS]
        assert [u.formatted_text for u in units] == ["5", "00"]

    def test_no_units(self):
        assert resolve_units(Duration(5, "minutes"), template="n/a") == []
