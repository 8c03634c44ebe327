#
# Unit Label Localization and Pluralization
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import replace
from typing import Sequence

# Local ----------------------------------------------------------------------------------------------------------------
from .locales import LocaleData
from .tokenizer import Token
from .values import UnitValue


# Methods --------------------------------------------------------------------------------------------------------------

def plural_key(unit: UnitValue, locale_data: LocaleData) -> str:
    """
    Label key of a rendered unit, read from its canonical text.

    "1" selects the singular key of English; "1.0" does not, since the canonical
    text carries a fraction part.
    """
    integer_text, _, fraction_text = unit.canonical_text.partition(".")
    integer = int(integer_text) if integer_text.isdigit() else 0
    decimal = float("0." + fraction_text) if fraction_text else None
    return locale_data.plural_key(unit.unit_type.code, integer, decimal)


def localize_token(token: Token, unit: UnitValue, locale_data: LocaleData, *, use_plural: bool = True) -> Token:
    """
    Localize and pluralize the unit labels in one token's text.

    Placeholders ("__" standard, "_" short) are replaced by the pluralized label of
    their label type, first occurrence each. Without placeholders and with
    use_plural, the longest label of the unit found in the text decides: a correctly
    pluralized label is kept, a wrongly pluralized one is replaced.

    Examples:
        >>> from durfmt.locales import ENGLISH
        >>> from durfmt.units import UnitType
        >>> unit = UnitValue(UnitType.HOURS, 1, 1, 0, canonical_text="1")
        >>> localize_token(Token(UnitType.HOURS, " hours"), unit, ENGLISH).text
        ' hour'
    """
    key = plural_key(unit, locale_data)
    labels = locale_data.unit_labels(unit.unit_type)
    text = token.text

    pluralized: dict[str, str] = {}
    auto_localized = False

    for label_type in locale_data.label_types:
        label = next((t for kind, k, t in labels if kind == label_type.name and k == key), None)
        if label is None:
            continue
        pluralized[label_type.name] = label
        if label_type.placeholder in text:
            text = text.replace(label_type.placeholder, label, 1)
            auto_localized = True

    if use_plural and not auto_localized:
        for kind, _, label in sorted(labels, key=lambda item: len(item[2]), reverse=True):
            if pluralized.get(kind) == label:
                if label in text:
                    break
                continue
            if label in text and kind in pluralized:
                text = text.replace(label, pluralized[kind], 1)
                break

    return token if text == token.text else replace(token, text=text)


def localize_labels(tokens: Sequence[Token],
                    units: Sequence[UnitValue],
                    locale_data: LocaleData,
                    *,
                    use_plural: bool = True,
                    ) -> list[Token]:
    """Localize the labels of every unit token with a surviving unit value."""
    by_type = {unit.unit_type: unit for unit in units}
    localized = []
    for token in tokens:
        unit = by_type.get(token.unit_type) if token.is_unit else None
        localized.append(token if unit is None else localize_token(token, unit, locale_data, use_plural=use_plural))
    return localized
