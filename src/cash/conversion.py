"""
conversion.py — Building Cash from raw numbers and text.

Numbers are read as minor units unless the caller asks otherwise; text is
read as whole units, since that is how amounts are written by people:

    from_integer(12345)       -> 123.45
    from_float(2.5)           -> 0.03   (2.5 cents, HALF_UP)
    from_text("$1,234.50")    -> 1234.50
"""

from __future__ import annotations
from decimal import Decimal
import re
from typing import Any, Union

from .core import Cash
from .enums import Interpretation


_NOT_NUMERIC = re.compile(r"[^\d.,]")


def _with_interpretation(options: dict, interpretation: Interpretation) -> dict:
    options.setdefault("interpretation", interpretation)
    return options


def from_integer(value: int, **options: Any) -> Cash:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Expected int, got {type(value).__name__}")
    return Cash(value, **_with_interpretation(options, Interpretation.MINOR_UNITS))


def from_float(value: float, **options: Any) -> Cash:
    if not isinstance(value, float):
        raise TypeError(f"Expected float, got {type(value).__name__}")
    return Cash(value, **_with_interpretation(options, Interpretation.MINOR_UNITS))


def from_decimal(value: Decimal, **options: Any) -> Cash:
    if not isinstance(value, Decimal):
        raise TypeError(f"Expected Decimal, got {type(value).__name__}")
    return Cash(value, **_with_interpretation(options, Interpretation.MINOR_UNITS))


def clean_text(text: str) -> str:
    """
    Keep digits and the decimal point, drop everything else.

    Thousands separators (",") are removed, as are currency symbols, spaces
    and signs: "-$1,234.50" -> "1234.50".
    """
    return _NOT_NUMERIC.sub("", text).replace(",", "")


def from_text(text: str, **options: Any) -> Cash:
    """
    Parse a human-written amount such as "1,234.50 EUR".

    Raises:
        InvalidAmount: nothing numeric is left after cleaning
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    return Cash(clean_text(text), **_with_interpretation(options, Interpretation.WHOLE_DECIMAL))


def to_cash(value: Union[Cash, int, float, Decimal, str], **options: Any) -> Cash:
    """Dispatch to the from_* function matching the type of value. A Cash is returned as is."""
    if isinstance(value, Cash):
        return value
    if isinstance(value, str):
        return from_text(value, **options)
    if isinstance(value, float):
        return from_float(value, **options)
    if isinstance(value, Decimal):
        return from_decimal(value, **options)
    if isinstance(value, int) and not isinstance(value, bool):
        return from_integer(value, **options)
    raise TypeError(f"Cannot convert {type(value).__name__} to Cash")
