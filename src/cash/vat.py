"""
vat.py — VAT rate application and inclusion-status algebra.

VAT never alters the stored amount of a Cash. The rate backs two accessors
(amount plus VAT, amount less VAT) and the status records whether the stored
amount already contains VAT.

STATUS ALGEBRA:
    combine(s, s)              -> s        for s in {INCLUDED, EXCLUDED}
    combine(INCLUDED, EXCLUDED) -> MIXED
    combine(MIXED, anything)    -> MIXED    (including MIXED itself)

MIXED is terminal: a total whose composition is heterogeneous cannot be
invoiced as included or excluded, and further combination must not pretend
otherwise.
"""

from __future__ import annotations
from decimal import Context, Decimal

from .enums import VatStatus


HUNDRED = Decimal(100)


def combine_status(left: VatStatus, right: VatStatus) -> VatStatus:
    """Status of a value derived from two operands."""
    if left is right and left is not VatStatus.MIXED:
        return left
    return VatStatus.MIXED


def vat_multiplier(rate: Decimal, context: Context) -> Decimal:
    """1 + rate/100, e.g. Decimal('1.2') for a 20% rate."""
    return context.add(1, context.divide(rate, HUNDRED))


def amount_plus_vat(
    amount: Decimal,
    rate: Decimal,
    status: VatStatus,
    context: Context,
) -> Decimal:
    """Amount with VAT on top; unchanged when VAT is already included."""
    if status is VatStatus.INCLUDED:
        return amount
    return context.multiply(amount, vat_multiplier(rate, context))


def amount_less_vat(
    amount: Decimal,
    rate: Decimal,
    status: VatStatus,
    context: Context,
) -> Decimal:
    """Amount with VAT taken out; unchanged when VAT is not included."""
    if status is VatStatus.INCLUDED:
        return context.divide(amount, vat_multiplier(rate, context))
    return amount
