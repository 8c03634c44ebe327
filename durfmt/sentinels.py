"""
Sentinel for lookups where None is a legitimate stored value.

Example:
    >>> fmt = cache.get(key, NOT_FOUND)
    >>> if fmt is NOT_FOUND:
    ...     fmt = build_formatter(key)
"""

from typing import Any, Final

__all__ = [
    'NOT_FOUND',
    'NotFoundType',
    'iffound',
]


# Sentinel Types -------------------------------------------------------------------------------------------------------

class NotFoundType:
    """
    Singleton type of NOT_FOUND, the result of a failed cache or registry lookup.

    Falsy, and equal only to itself.
    """
    __slots__ = ()

    _instance: 'NotFoundType | None' = None

    def __new__(cls) -> 'NotFoundType':
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return '<NOT_FOUND>'

    def __bool__(self) -> bool:
        return False


# Sentinel Objects -----------------------------------------------------------------------------------------------------

NOT_FOUND: Final[NotFoundType] = NotFoundType()
"""
Sentinel representing a failed lookup operation.

Use with identity check: `if result is NOT_FOUND:`
"""


# Helper Functions -----------------------------------------------------------------------------------------------------

def iffound(value: Any, *, default: Any = None) -> Any:
    """
    Return value if it's not NOT_FOUND, otherwise return default.

    Example:
        >>> iffound(registry.peek("fr"), default=ENGLISH)
    """
    return default if value is NOT_FOUND else value
