#
# Duration Template Tokenizer
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type
from .locales import ENGLISH, LocaleData
from .units import UnitType, by_magnitude


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Token:
    """
    A template token.

    Unit tokens carry the literal text attached to them (after the numeral, or
    before it with left units). Literal tokens have unit_type None and hold text
    that has no unit to attach to.

    Attributes:
        unit_type: Temporal unit, or None for literal text.
        text: Attached literal text.
        length: Token width used as zero-padding width, e.g. 2 for "hh".
        stop_trim: The token was marked with a leading "*".
    """
    unit_type: UnitType | None
    text: str = ""
    length: int = 0
    stop_trim: bool = False

    @property
    def is_unit(self) -> bool:
        return self.unit_type is not None


@dataclass(frozen=True)
class _RawToken:
    kind: UnitType
    text: str
    stop_trim: bool = False


# Methods --------------------------------------------------------------------------------------------------------------

def tokenize(template: str,
             locale_data: LocaleData = ENGLISH,
             *,
             use_left_units: bool = False,
             ) -> list[Token]:
    """
    Split a duration template into unit and literal tokens.

    Time template aliases of the locale ("_HMS_" -> "h:mm:ss") are substituted
    first. Bracketed text is literal: "[hours]" renders as "hours". Literal text
    merges into the preceding unit token, or into the following one when
    use_left_units is set.

    Args:
        template: Template string such as "h:mm:ss" or "d [days], h [hours]".
        locale_data: Token patterns and time templates.
        use_left_units: Attach literal text to the unit token on its right.

    Returns:
        Tokens in template order.

    Raises:
        TypeError: If template is not a str.

    Examples:
        >>> [(t.unit_type, t.text) for t in tokenize("h [hrs], m")]
        [(<UnitType.HOURS: 'hours'>, ' hrs, '), (<UnitType.MINUTES: 'minutes'>, '')]
    """
    if not isinstance(template, str):
        raise TypeError(f"template must be str, but got {fmt_type(template)}")

    for alias, expansion in locale_data.time_templates.items():
        template = template.replace(f"_{alias}_", expansion, 1)

    raw_tokens = list(_scan(template, locale_data))
    if use_left_units:
        raw_tokens.reverse()

    tokens: list[Token] = []
    current = Token(None)

    for raw in raw_tokens:
        if raw.kind.is_temporal:
            if current.is_unit or current.text:
                tokens.append(current)
            current = Token(raw.kind, length=len(raw.text), stop_trim=raw.stop_trim)
            continue

        if use_left_units:
            current = Token(current.unit_type, raw.text + current.text, current.length, current.stop_trim)
        else:
            current = Token(current.unit_type, current.text + raw.text, current.length, current.stop_trim)

    if current.is_unit or current.text:
        tokens.append(current)

    if use_left_units:
        tokens.reverse()
    return tokens


def parse_unit_types(text: str, locale_data: LocaleData = ENGLISH) -> tuple[UnitType, ...]:
    """
    Unit types named by template tokens in text, in descending magnitude.

    Literal and escaped text is ignored; "*" markers are accepted.

    Examples:
        >>> parse_unit_types("*h mm [s]")
        (<UnitType.HOURS: 'hours'>, <UnitType.MINUTES: 'minutes'>)
    """
    if not isinstance(text, str):
        raise TypeError(f"unit tokens must be str, but got {fmt_type(text)}")
    return by_magnitude(raw.kind for raw in _scan(text, locale_data))


def stop_trim_types(tokens: list[Token]) -> frozenset[UnitType]:
    """Unit types marked with "*" anywhere in the template."""
    return frozenset(t.unit_type for t in tokens if t.is_unit and t.stop_trim)


def unit_types(tokens: list[Token]) -> tuple[UnitType, ...]:
    """Distinct unit types of the tokens, in descending magnitude."""
    return by_magnitude(t.unit_type for t in tokens if t.is_unit)


# Private Methods ------------------------------------------------------------------------------------------------------

def _scan(template: str, locale_data: LocaleData) -> Iterator[_RawToken]:
    """Scan once per position; the first pattern matching at the position wins."""
    patterns = locale_data.token_patterns
    position = 0
    while position < len(template):
        for kind, pattern in patterns:
            match = pattern.match(template, position)
            if match and match.end() > position:
                break
        else:
            # No pattern at all, take one literal character
            yield _RawToken(UnitType.GENERAL, template[position])
            position += 1
            continue

        text = match.group(0)
        position = match.end()

        if kind == UnitType.ESCAPE:
            yield _RawToken(kind, match.group(1) if match.groups() else text)
        elif kind.is_temporal and text.startswith("*"):
            yield _RawToken(kind, text[1:], stop_trim=True)
        else:
            yield _RawToken(kind, text)
