"""
cash — Decimal-exact money for financial calculations

Sums of money are stored as integer minor units backed by Decimal, so no
computation ever goes through binary floating point.

================================================================================
QUICK START
================================================================================

Basic usage:

    from cash import Cash, Currency

    price = Cash(1999, currency=Currency.EUR)     # 19.99 EUR
    total = price * 3                             # 59.97 EUR
    str(total)                                    # '59.97'

    total / price                                 # Decimal('3')
    divmod(Cash(1000), 3)                         # (Cash('3.33'), Cash('0.01'))

Text and whole-unit input:

    from cash import from_text

    from_text("$1,234.50").cents                  # 123450

VAT:

    gross = Cash(12000, vat_included=True)
    gross.amount_less_vat == 10000                # True
    (gross + Cash(500)).vat_status                # VatStatus.MIXED

Process-wide defaults:

    from cash import defaults_scope

    with defaults_scope(units_per_whole=1000, rounding="half_even"):
        Cash(2.5).cents                           # 2

================================================================================
"""

from .core import Cash
from .currency import Currency
from .enums import Interpretation, RoundingMode, VatStatus
from .errors import (
    CashError,
    DivisionByZero,
    IncompatibleCurrency,
    InvalidAmount,
    InvalidConfiguration,
)
from .config import (
    CashSettings,
    Defaults,
    defaults_scope,
    get_defaults,
    load_defaults_from_env,
    reset_defaults,
    set_defaults,
)
from .conversion import (
    clean_text,
    from_decimal,
    from_float,
    from_integer,
    from_text,
    to_cash,
)
from .log import setup_logging

__version__ = "1.0.0"
__license__ = "MIT"

__all__ = [
    # Core
    "Cash",
    "Currency",
    "RoundingMode",
    "VatStatus",
    "Interpretation",
    # Errors
    "CashError",
    "IncompatibleCurrency",
    "DivisionByZero",
    "InvalidConfiguration",
    "InvalidAmount",
    # Defaults
    "Defaults",
    "CashSettings",
    "get_defaults",
    "set_defaults",
    "reset_defaults",
    "defaults_scope",
    "load_defaults_from_env",
    # Conversion
    "from_integer",
    "from_float",
    "from_decimal",
    "from_text",
    "clean_text",
    "to_cash",
    # Logging
    "setup_logging",
]
