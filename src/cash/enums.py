"""
enums.py — Enumerations shared by the Cash value type and its configuration.
"""

from __future__ import annotations
from decimal import (
    ROUND_05UP,
    ROUND_CEILING,
    ROUND_DOWN,
    ROUND_FLOOR,
    ROUND_HALF_DOWN,
    ROUND_HALF_EVEN,
    ROUND_HALF_UP,
    ROUND_UP,
)
from enum import Enum


# ==============================================================================
# ROUNDING STRATEGIES
# ==============================================================================

class RoundingMode(Enum):
    """
    Rounding strategies, backed by the decimal module's constants.

    The choice has real consequences:
    - HALF_UP: commercial rounding (2.5 -> 3), the default
    - HALF_EVEN: banker's rounding (2.5 -> 2), minimises statistical bias
    - DOWN / UP: toward / away from zero
    - CEILING / FLOOR: toward +inf / -inf
    - HALF_DOWN: 2.5 -> 2
    - ZERO_FIVE_UP: away from zero only if the last digit is 0 or 5

    Tax authorities often mandate a specific strategy.
    """
    HALF_UP = ROUND_HALF_UP
    HALF_EVEN = ROUND_HALF_EVEN
    HALF_DOWN = ROUND_HALF_DOWN
    UP = ROUND_UP
    DOWN = ROUND_DOWN
    CEILING = ROUND_CEILING
    FLOOR = ROUND_FLOOR
    ZERO_FIVE_UP = ROUND_05UP


# ==============================================================================
# VAT STATUS
# ==============================================================================

class VatStatus(Enum):
    """
    Whether an amount already contains VAT.

    MIXED marks a total assembled from operands that disagreed. Its invoicing
    treatment is unknown, so it never resolves back to a concrete status.
    """
    INCLUDED = "included"
    EXCLUDED = "excluded"
    MIXED = "mixed"


# ==============================================================================
# INPUT INTERPRETATION
# ==============================================================================

class Interpretation(Enum):
    """How the raw amount passed to the constructor is read."""
    MINOR_UNITS = "minor_units"      # 12345 -> 12345 cents
    WHOLE_DECIMAL = "whole_decimal"  # 123.45 -> 12345 cents
