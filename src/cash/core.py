"""
core.py — Cash, a decimal-exact monetary value type

================================================================================
DESIGN PRINCIPLES
================================================================================

1. INTERNAL REPRESENTATION
   An integer count of minor units (cents for USD, fils for KWD, ...),
   held as a Decimal. Never floating point internally.

2. ROUNDING ONCE
   Every construction and every arithmetic result is rounded to zero
   fractional digits exactly once, with the value's own rounding mode.
   Intermediate results are exact Decimals, never truncated ints.

3. IMMUTABILITY
   Frozen dataclass. Every operation returns a new instance. A Cash never
   re-reads the process defaults after construction, so concurrent reads
   and operations on the same value need no locking.

4. CURRENCY SAFETY
   Currency-aware operators (+, -, /, %, divmod, comparisons) reject
   operands carrying different currencies with IncompatibleCurrency.
   Operations against bare scalars are currency-agnostic.

5. VAT TRACKING
   Each value knows whether its amount includes VAT. Combining two values
   derives the status through the algebra in vat.py.

================================================================================
DUAL OPERATORS
================================================================================

Division, modulo and divmod behave differently for a Cash and a scalar
right-hand side:

    Cash(600) / Cash(400)        -> Decimal('1.5')   (how many times b fits in a)
    Cash(600) / 4                -> Cash(150)
    Cash(600) % Cash(400)        -> Cash(200)
    divmod(Cash(600), Cash(400)) -> (Decimal('1'), Cash(200))
    divmod(Cash(600), 4)         -> (Cash(150), Cash(0))

Quotient and remainder follow floor division: the remainder takes the sign
of the divisor and a == q * b + r holds exactly.

================================================================================
"""

from __future__ import annotations
from dataclasses import dataclass
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, Context, Decimal, InvalidOperation
from typing import Any, Hashable, Optional, Tuple, Union

import structlog

from . import vat
from .config import UNSET, ResolvedOptions, resolve
from .currency import ensure_compatible
from .enums import Interpretation, RoundingMode, VatStatus
from .errors import DivisionByZero, InvalidAmount


logger = structlog.get_logger()

# Private contexts: host changes to decimal.getcontext() never leak in.
# Sums, differences and products of finite Decimals are always exact here.
_EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)

# Fractional digits kept past the integer part of a quotient.
ARITHMETIC_PRECISION = 60

Scalar = Union[int, float, Decimal, str]


def _to_decimal(value: Any) -> Decimal:
    """Read a scalar as a Decimal. Floats go through str() like user input."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a monetary scalar")
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, (float, str)):
        try:
            return Decimal(str(value).strip())
        except InvalidOperation as e:
            raise InvalidAmount(f"Not a decimal number: {value!r}") from e
    raise TypeError(f"Cannot use {type(value).__name__} as a monetary scalar")


def _division_context(dividend: Decimal, divisor: Decimal) -> Context:
    """Enough precision for every integer digit of the quotient plus ARITHMETIC_PRECISION more."""
    integer_digits = max(dividend.adjusted() - divisor.adjusted() + 1, 0)
    return Context(prec=integer_digits + ARITHMETIC_PRECISION, Emax=MAX_EMAX, Emin=MIN_EMIN)


def _floor_divmod(dividend: Decimal, divisor: Decimal) -> Tuple[Decimal, Decimal]:
    """
    divmod with floor semantics.

    Decimal's own divmod truncates toward zero; shift the pair when the
    remainder and the divisor disagree in sign.
    """
    quotient, remainder = _EXACT.divmod(dividend, divisor)
    if remainder and (remainder < 0) != (divisor < 0):
        quotient = _EXACT.subtract(quotient, 1)
        remainder = _EXACT.add(remainder, divisor)
    return quotient, remainder


# ==============================================================================
# CASH CLASS
# ==============================================================================

@dataclass(frozen=True, slots=True, init=False, eq=False, repr=False)
class Cash:
    """
    Immutable sum of money in integer minor units.

    INVARIANTS:
    1. _amount is an integer-valued Decimal
    2. _decimal_places == ceil(log10(_units_per_whole))
    3. a currency's own units_per_whole overrides any option or default
    4. operators between different currencies raise IncompatibleCurrency

    USAGE:
        price = Cash(1999, currency=Currency.EUR)          # 19.99 EUR
        total = price * 3                                  # 59.97 EUR
        share = total / 4                                  # 14.99 EUR (HALF_UP)
        str(Cash("19.99", interpretation="whole_decimal")) # '19.99'
    """
    _amount: Decimal
    _units_per_whole: int
    _decimal_places: int
    _rounding: RoundingMode
    _currency: Optional[Hashable]
    _vat_rate: Decimal
    _vat_status: VatStatus

    def __init__(
        self,
        amount: Scalar = 0,
        *,
        units_per_whole: Optional[int] = None,
        rounding: Union[RoundingMode, str, None] = None,
        currency: Optional[Hashable] = UNSET,
        vat_rate: Optional[Scalar] = None,
        vat_included: Union[VatStatus, bool, str, None] = None,
        interpretation: Union[Interpretation, str, None] = None,
    ) -> None:
        """
        Build a Cash, falling back to the current defaults for unset options.

        Args:
            amount: minor units (default) or whole units with
                interpretation=WHOLE_DECIMAL
            units_per_whole: minor units in one whole unit (100 for cents);
                ignored when the currency defines its own
            rounding: RoundingMode applied to every result
            currency: None, an opaque identifier or a Currency
            vat_rate: VAT percentage, 20 by default
            vat_included: VatStatus, or True/False for INCLUDED/EXCLUDED
            interpretation: MINOR_UNITS or WHOLE_DECIMAL

        Raises:
            InvalidConfiguration: an option is outside its domain
            InvalidAmount: amount is not a decimal number
        """
        opts = resolve(
            units_per_whole=units_per_whole,
            rounding=rounding,
            currency=currency,
            vat_rate=vat_rate,
            vat_included=vat_included,
            interpretation=interpretation,
        )
        raw = _to_decimal(amount)
        if not raw.is_finite():
            raise InvalidAmount(f"Amount must be finite, got {amount!r}")
        if opts.interpretation is Interpretation.WHOLE_DECIMAL:
            raw = self._whole_to_minor(raw, opts)
        self._assign(raw, opts)

    @staticmethod
    def _whole_to_minor(raw: Decimal, opts: ResolvedOptions) -> Decimal:
        """whole * units_per_whole + fraction * 10**decimal_places."""
        whole = raw.to_integral_value(rounding=RoundingMode.DOWN.value)
        fraction = _EXACT.subtract(raw, whole)
        return _EXACT.add(
            _EXACT.multiply(whole, opts.units_per_whole),
            fraction.scaleb(opts.decimal_places, _EXACT),
        )

    def _assign(self, raw: Decimal, opts: ResolvedOptions) -> None:
        amount = raw.to_integral_value(rounding=opts.rounding.value)
        # normalise -0 and exponent so equal amounts render and hash alike
        amount = _EXACT.add(amount, 0).quantize(Decimal(1), context=_EXACT)
        setter = object.__setattr__
        setter(self, "_amount", amount)
        setter(self, "_units_per_whole", opts.units_per_whole)
        setter(self, "_decimal_places", opts.decimal_places)
        setter(self, "_rounding", opts.rounding)
        setter(self, "_currency", opts.currency)
        setter(self, "_vat_rate", opts.vat_rate)
        setter(self, "_vat_status", opts.vat_status)

    def _derive(self, raw: Decimal, vat_status: Optional[VatStatus] = None) -> Cash:
        """New Cash from a minor-unit result, carrying this value's configuration."""
        return Cash(
            raw,
            units_per_whole=self._units_per_whole,
            rounding=self._rounding,
            currency=self._currency,
            vat_rate=self._vat_rate,
            vat_included=self._vat_status if vat_status is None else vat_status,
            interpretation=Interpretation.MINOR_UNITS,
        )

    @classmethod
    def zero(cls, **options: Any) -> Cash:
        """Zero with the given options. Useful as the start value of sum()."""
        return cls(0, **options)

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def _guard(self, other: object, operation: str) -> None:
        """Currency check; skipped for scalars, which carry no currency."""
        if isinstance(other, Cash):
            ensure_compatible(self._currency, other._currency, operation)

    def _check_divisor(self, divisor: Decimal, operation: str) -> None:
        if divisor == 0:
            logger.warning("division_by_zero", operation=operation, dividend=str(self._amount))
            raise DivisionByZero(f"Cash {operation} by zero")

    # -------------------------------------------------------------------------
    # Arithmetic
    # -------------------------------------------------------------------------

    def __add__(self, other: Cash) -> Cash:
        if not isinstance(other, Cash):
            return NotImplemented
        self._guard(other, "+")
        return self._derive(
            _EXACT.add(self._amount, other._amount),
            vat.combine_status(self._vat_status, other._vat_status),
        )

    def __sub__(self, other: Cash) -> Cash:
        if not isinstance(other, Cash):
            return NotImplemented
        self._guard(other, "-")
        return self._derive(
            _EXACT.subtract(self._amount, other._amount),
            vat.combine_status(self._vat_status, other._vat_status),
        )

    def __neg__(self) -> Cash:
        return self._derive(-self._amount)

    def __abs__(self) -> Cash:
        return self._derive(abs(self._amount))

    def __mul__(self, factor: Scalar) -> Cash:
        """
        Multiplication by a scalar (quantity, percentage factor, ...).

        Cash * Cash has no monetary meaning and is not supported.
        """
        if isinstance(factor, Cash):
            return NotImplemented
        try:
            k = _to_decimal(factor)
        except TypeError:
            return NotImplemented
        return self._derive(_EXACT.multiply(self._amount, k))

    def __rmul__(self, factor: Scalar) -> Cash:
        return self.__mul__(factor)

    def __truediv__(self, other: Union[Cash, Scalar]) -> Union[Decimal, Cash]:
        if isinstance(other, Cash):
            self._guard(other, "/")
            self._check_divisor(other._amount, "/")
            return _division_context(self._amount, other._amount).divide(self._amount, other._amount)
        try:
            k = _to_decimal(other)
        except TypeError:
            return NotImplemented
        self._check_divisor(k, "/")
        return self._derive(_division_context(self._amount, k).divide(self._amount, k))

    def __mod__(self, other: Union[Cash, Scalar]) -> Cash:
        if isinstance(other, Cash):
            self._guard(other, "%")
            self._check_divisor(other._amount, "%")
            _, remainder = _floor_divmod(self._amount, other._amount)
            return self._derive(
                remainder,
                vat.combine_status(self._vat_status, other._vat_status),
            )
        try:
            k = _to_decimal(other)
        except TypeError:
            return NotImplemented
        self._check_divisor(k, "%")
        _, remainder = _floor_divmod(self._amount, k)
        return self._derive(remainder)

    def __divmod__(
        self, other: Union[Cash, Scalar]
    ) -> Union[Tuple[Decimal, Cash], Tuple[Cash, Cash]]:
        if isinstance(other, Cash):
            self._guard(other, "divmod")
            self._check_divisor(other._amount, "divmod")
            quotient, remainder = _floor_divmod(self._amount, other._amount)
            return (
                quotient,
                self._derive(remainder, vat.combine_status(self._vat_status, other._vat_status)),
            )
        try:
            k = _to_decimal(other)
        except TypeError:
            return NotImplemented
        self._check_divisor(k, "divmod")
        quotient, remainder = _floor_divmod(self._amount, k)
        return (self._derive(quotient), self._derive(remainder))

    def divmod(self, other: Union[Cash, Scalar]) -> Union[Tuple[Decimal, Cash], Tuple[Cash, Cash]]:
        result = self.__divmod__(other)
        if result is NotImplemented:
            raise TypeError(f"unsupported operand type for divmod: {type(other).__name__}")
        return result

    # -------------------------------------------------------------------------
    # Comparison
    # -------------------------------------------------------------------------

    def compare(self, other: Cash) -> int:
        """-1, 0 or 1 as this amount is less than, equal to or greater than other."""
        self._check_comparable(other, "compare")
        if self._amount < other._amount:
            return -1
        if self._amount > other._amount:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Cash):
            return NotImplemented
        self._guard(other, "==")
        return self._amount == other._amount

    def __ne__(self, other: object) -> bool:
        if not isinstance(other, Cash):
            return NotImplemented
        self._guard(other, "!=")
        return self._amount != other._amount

    def __lt__(self, other: Cash) -> bool:
        self._check_comparable(other, "<")
        return self._amount < other._amount

    def __le__(self, other: Cash) -> bool:
        self._check_comparable(other, "<=")
        return self._amount <= other._amount

    def __gt__(self, other: Cash) -> bool:
        self._check_comparable(other, ">")
        return self._amount > other._amount

    def __ge__(self, other: Cash) -> bool:
        self._check_comparable(other, ">=")
        return self._amount >= other._amount

    def _check_comparable(self, other: object, operation: str) -> None:
        if not isinstance(other, Cash):
            raise TypeError(f"Cannot compare Cash with {type(other).__name__}")
        self._guard(other, operation)

    def __hash__(self) -> int:
        return hash((self._amount, self._currency))

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def amount(self) -> Decimal:
        """Minor units as an integer-valued Decimal."""
        return self._amount

    @property
    def cents(self) -> int:
        """Minor units as int. For persistence and exact round-tripping."""
        return int(self._amount)

    minor_units = cents

    @property
    def units_per_whole(self) -> int:
        return self._units_per_whole

    @property
    def decimal_places(self) -> int:
        return self._decimal_places

    @property
    def rounding(self) -> RoundingMode:
        return self._rounding

    @property
    def currency(self) -> Optional[Hashable]:
        return self._currency

    @property
    def vat_rate(self) -> Decimal:
        return self._vat_rate

    @property
    def vat_status(self) -> VatStatus:
        return self._vat_status

    @property
    def vat_included(self) -> bool:
        return self._vat_status is VatStatus.INCLUDED

    @property
    def amount_plus_vat(self) -> Decimal:
        """Minor units with VAT on top (unchanged when VAT is included)."""
        return vat.amount_plus_vat(self._amount, self._vat_rate, self._vat_status, _EXACT)

    @property
    def amount_less_vat(self) -> Decimal:
        """Minor units without VAT (unchanged when VAT is not included)."""
        context = _division_context(self._amount, vat.vat_multiplier(self._vat_rate, _EXACT))
        return vat.amount_less_vat(self._amount, self._vat_rate, self._vat_status, context)

    def is_positive(self) -> bool:
        return self._amount > 0

    def is_negative(self) -> bool:
        return self._amount < 0

    def is_zero(self) -> bool:
        return self._amount == 0

    # -------------------------------------------------------------------------
    # Output
    # -------------------------------------------------------------------------

    def to_decimal_string(self) -> str:
        """
        Whole units as a decimal string: 12345 cents -> '123.45'.

        With units_per_whole == 1 the bare integer is returned.
        """
        if self._units_per_whole == 1:
            return str(int(self._amount))

        sign = "-" if self._amount < 0 else ""
        whole, fraction = divmod(abs(int(self._amount)), self._units_per_whole)
        return f"{sign}{whole}.{fraction:0{self._decimal_places}d}"

    def to_float(self) -> float:
        """
        Whole units as float.

        WARNING: lossy, for display and legacy interfaces only.
        """
        return float(self.to_decimal_string())

    def __str__(self) -> str:
        return self.to_decimal_string()

    def __float__(self) -> float:
        return self.to_float()

    def __repr__(self) -> str:
        return (
            f"Cash({self.to_decimal_string()!r}, currency={self._currency!r}, "
            f"vat_status={self._vat_status.value})"
        )
