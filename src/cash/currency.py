"""
currency.py — Currency records and the currency compatibility guard.

A currency on a Cash is either absent (None), an opaque hashable identifier
("usd", "points", ...) or a Currency record. A Currency with units_per_whole
set is the source of truth for the subunit granularity of every Cash that
carries it.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Hashable, Optional

import structlog

from .errors import IncompatibleCurrency


logger = structlog.get_logger()


# ==============================================================================
# CURRENCY DEFINITIONS
# ==============================================================================

@dataclass(frozen=True, slots=True)
class Currency:
    """
    Currency identifier, optionally carrying its own granularity.

    Currency("USD")       -> identifier only, granularity comes from options
    Currency("USD", 100)  -> 100 minor units per whole, overrides options

    Equality is structural: Currency("USD") and Currency("USD", 100) are
    different currencies.
    """
    code: str
    units_per_whole: Optional[int] = None

    EUR: ClassVar[Currency]
    USD: ClassVar[Currency]
    GBP: ClassVar[Currency]
    JPY: ClassVar[Currency]
    KWD: ClassVar[Currency]
    BTC: ClassVar[Currency]

    def __post_init__(self) -> None:
        upw = self.units_per_whole
        if upw is not None and (isinstance(upw, bool) or not isinstance(upw, int) or upw <= 0):
            raise ValueError(f"units_per_whole must be a positive int, got {upw!r}")

    def __str__(self) -> str:
        return self.code

    @classmethod
    def from_code(cls, code: str) -> Currency:
        """Predefined currency for an ISO code, else an identifier-only one."""
        predefined = getattr(cls, code.upper(), None)
        if isinstance(predefined, Currency):
            return predefined
        return cls(code.upper())


# ISO 4217 minor units
Currency.EUR = Currency("EUR", 100)           # 1 EUR = 100 cents
Currency.USD = Currency("USD", 100)           # 1 USD = 100 cents
Currency.GBP = Currency("GBP", 100)           # 1 GBP = 100 pence
Currency.JPY = Currency("JPY", 1)             # no minor unit
Currency.KWD = Currency("KWD", 1000)          # 1 KWD = 1000 fils
Currency.BTC = Currency("BTC", 100_000_000)   # 1 BTC = 100,000,000 satoshi


def granularity_of(currency: Optional[Hashable]) -> Optional[int]:
    """Units per whole imposed by the currency, or None if it imposes none."""
    if isinstance(currency, Currency):
        return currency.units_per_whole
    return None


# ==============================================================================
# COMPATIBILITY GUARD
# ==============================================================================

def ensure_compatible(
    left: Optional[Hashable],
    right: Optional[Hashable],
    operation: str,
) -> None:
    """
    Raise IncompatibleCurrency unless both currencies are equal.

    None is compatible only with None.
    """
    if left == right:
        return
    logger.warning(
        "incompatible_currency",
        operation=operation,
        left=str(left),
        right=str(right),
    )
    raise IncompatibleCurrency(left, right, operation)
