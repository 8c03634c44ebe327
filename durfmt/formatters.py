"""
Formatting helpers for exception and warning messages.

Repr-safe formatters used to build the diagnostic messages raised by settings
validation and the public entry points.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Iterable

PRIMITIVE_TYPES = (
    type(None),
    bool,  # Comes before int (is subclass of int)
    int,
    float,
    str,
)


# Methods --------------------------------------------------------------------------------------------------------------

def fmt_type(obj: Any, *, max_repr: int = 120) -> str:
    """
    Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        '<int>'
        >>> fmt_type(int)
        '<int>'
    """
    cls = obj if isinstance(obj, type) else type(obj)
    return f"<{_fmt_truncate(getattr(cls, '__name__', '<unknown>'), max_repr)}>"


def fmt_value(obj: Any, *, max_repr: int = 120) -> str:
    """
    Format a single value as a type-value pair for exception messages.

    Primitives (None, bool, int, float) render as their bare repr; strings are
    quoted. Everything else is shown with its type name, and a closing angle
    bracket inside the repr is escaped.

    Examples:
        >>> fmt_value(42)
        '42'
        >>> fmt_value("large")
        "'large'"
        >>> fmt_value([3, 2])
        '<list: [3, 2]>'
    """
    repr_ = _fmt_truncate(_safe_repr(obj).replace(">", "\\>"), max_repr)

    if type(obj) in PRIMITIVE_TYPES:
        return repr_

    return f"<{type(obj).__name__}: {repr_}>"


def fmt_sequence(items: Iterable[Any], *, max_items: int = 12) -> str:
    """
    Format a short, comma-separated listing of choices for exception messages.

    Examples:
        >>> fmt_sequence(["large", "small"])
        "'large', 'small'"
        >>> fmt_sequence(range(20), max_items=3)
        '0, 1, 2, ...'
    """
    items = list(items)
    shown = [_safe_repr(item) for item in items[:max_items]]
    if len(items) > max_items:
        shown.append("...")
    return ", ".join(shown)


# Private Methods ------------------------------------------------------------------------------------------------------

def _fmt_truncate(repr_: str, max_len: int) -> str:
    """
    Truncate repr_ to at most max_len visible characters before appending "...".

    Quoted reprs keep their quotes, with the ellipsis placed inside the closing quote.
    """
    if max_len <= 0:
        return ""
    if len(repr_) <= max_len:
        return repr_

    if len(repr_) >= 2 and repr_[0] in ("'", '"') and repr_[-1] == repr_[0]:
        quote = repr_[0]
        return f"{quote}{repr_[1:1 + max_len]}...{quote}"

    return repr_[:max_len] + "..."


def _safe_repr(obj: Any) -> str:
    """
    repr() that survives a broken __repr__
    """
    try:
        return repr(obj)
    except Exception as e:
        return f"<{type(obj).__name__} object (repr failed: {type(e).__name__})>"
