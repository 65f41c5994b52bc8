"""
config.py — Process-wide defaults and the configuration resolver.

================================================================================
LIFECYCLE
================================================================================

The process holds exactly one current Defaults record. It is read when a Cash
is constructed and never again: a Cash behaves the same no matter how the
defaults change after it was built.

    get_defaults()              current record
    set_defaults(**changes)     replace fields, validated immediately
    reset_defaults()            back to the built-in constants
    defaults_scope(**changes)   temporary change, restored on exit
    load_defaults_from_env()    seed from CASH_* environment variables

Construction reads the defaults without locking. Hosts that change defaults
while other threads construct values must synchronise themselves.

================================================================================
"""

from __future__ import annotations
from contextlib import contextmanager
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Hashable, Iterator, Optional, Type, TypeVar

import structlog
from pydantic_settings import BaseSettings, SettingsConfigDict

from .currency import Currency, granularity_of
from .enums import Interpretation, RoundingMode, VatStatus
from .errors import InvalidConfiguration


logger = structlog.get_logger()

E = TypeVar("E", bound=Enum)

DEFAULT_UNITS_PER_WHOLE = 100
DEFAULT_ROUNDING = RoundingMode.HALF_UP
DEFAULT_CURRENCY = None
DEFAULT_VAT_RATE = Decimal(20)
DEFAULT_VAT_STATUS = VatStatus.EXCLUDED
DEFAULT_INTERPRETATION = Interpretation.MINOR_UNITS


class _Unset:
    """Marker for an option the caller did not pass (None is a valid currency)."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


# ==============================================================================
# COERCION
# ==============================================================================

def _coerce_enum(enum_cls: Type[E], value: Any, option: str) -> E:
    """Accept a member, a member value or a member name (case-insensitive)."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        pass
    if isinstance(value, str) and value.upper() in enum_cls.__members__:
        return enum_cls[value.upper()]
    logger.warning("invalid_configuration", option=option, value=repr(value))
    raise InvalidConfiguration(option, value)


def coerce_rounding(value: Any) -> RoundingMode:
    return _coerce_enum(RoundingMode, value, "rounding")


def coerce_interpretation(value: Any) -> Interpretation:
    return _coerce_enum(Interpretation, value, "interpretation")


def coerce_vat_status(value: Any) -> VatStatus:
    """True/False map to INCLUDED/EXCLUDED; otherwise a VatStatus member."""
    if value is True:
        return VatStatus.INCLUDED
    if value is False:
        return VatStatus.EXCLUDED
    return _coerce_enum(VatStatus, value, "vat_included")


def coerce_units_per_whole(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        logger.warning("invalid_configuration", option="units_per_whole", value=repr(value))
        raise InvalidConfiguration("units_per_whole", value)
    return value


def coerce_vat_rate(value: Any) -> Decimal:
    try:
        rate = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        rate = None
    # A rate of -100% or below has no VAT-free amount.
    if rate is None or not rate.is_finite() or rate <= -100:
        logger.warning("invalid_configuration", option="vat_rate", value=repr(value))
        raise InvalidConfiguration("vat_rate", value)
    return rate


def decimal_places_for(units_per_whole: int) -> int:
    """ceil(log10(units_per_whole)): 1 -> 0, 5 -> 1, 100 -> 2, 101 -> 3."""
    return 0 if units_per_whole == 1 else len(str(units_per_whole - 1))


# ==============================================================================
# DEFAULTS RECORD
# ==============================================================================

@dataclass(frozen=True)
class Defaults:
    """
    Process-wide fallback options.

    Fields are coerced and validated on creation, so a bad default fails
    where it is set, not at the first Cash built with it.
    """
    units_per_whole: int = DEFAULT_UNITS_PER_WHOLE
    rounding: RoundingMode = DEFAULT_ROUNDING
    currency: Optional[Hashable] = DEFAULT_CURRENCY
    vat_rate: Decimal = DEFAULT_VAT_RATE
    vat_included: VatStatus = DEFAULT_VAT_STATUS
    interpretation: Interpretation = DEFAULT_INTERPRETATION

    def __post_init__(self) -> None:
        object.__setattr__(self, "units_per_whole", coerce_units_per_whole(self.units_per_whole))
        object.__setattr__(self, "rounding", coerce_rounding(self.rounding))
        object.__setattr__(self, "vat_rate", coerce_vat_rate(self.vat_rate))
        object.__setattr__(self, "vat_included", coerce_vat_status(self.vat_included))
        object.__setattr__(self, "interpretation", coerce_interpretation(self.interpretation))


_current = Defaults()


def get_defaults() -> Defaults:
    return _current


def set_defaults(**changes: Any) -> Defaults:
    """
    Replace some fields of the current defaults.

    Raises:
        InvalidConfiguration: a value is outside its domain. The current
            defaults are left untouched.
        TypeError: an unknown field name was given.
    """
    global _current
    updated = replace(_current, **changes)
    _current = updated
    logger.debug("cash_defaults_updated", fields=sorted(changes))
    return updated


def reset_defaults() -> Defaults:
    global _current
    _current = Defaults()
    logger.debug("cash_defaults_reset")
    return _current


@contextmanager
def defaults_scope(**changes: Any) -> Iterator[Defaults]:
    """
    Temporarily change the defaults, restoring the previous record on exit.

        with defaults_scope(currency=Currency.EUR):
            Cash(100).currency  # Currency.EUR
    """
    global _current
    previous = _current
    try:
        yield set_defaults(**changes)
    finally:
        _current = previous


# ==============================================================================
# RESOLVER
# ==============================================================================

@dataclass(frozen=True)
class ResolvedOptions:
    """Fully resolved construction options for one Cash."""
    units_per_whole: int
    decimal_places: int
    rounding: RoundingMode
    currency: Optional[Hashable]
    vat_rate: Decimal
    vat_status: VatStatus
    interpretation: Interpretation


def resolve(
    units_per_whole: Any = None,
    rounding: Any = None,
    currency: Any = UNSET,
    vat_rate: Any = None,
    vat_included: Any = None,
    interpretation: Any = None,
) -> ResolvedOptions:
    """
    Merge explicit options with the current defaults.

    Resolution order for units_per_whole: currency granularity, then the
    explicit option, then the default. decimal_places always follows the
    resolved units_per_whole.
    """
    defaults = _current

    resolved_currency = defaults.currency if currency is UNSET else currency
    upw = granularity_of(resolved_currency)
    if upw is None:
        upw = defaults.units_per_whole if units_per_whole is None else coerce_units_per_whole(units_per_whole)

    return ResolvedOptions(
        units_per_whole=upw,
        decimal_places=decimal_places_for(upw),
        rounding=defaults.rounding if rounding is None else coerce_rounding(rounding),
        currency=resolved_currency,
        vat_rate=defaults.vat_rate if vat_rate is None else coerce_vat_rate(vat_rate),
        vat_status=defaults.vat_included if vat_included is None else coerce_vat_status(vat_included),
        interpretation=(
            defaults.interpretation if interpretation is None
            else coerce_interpretation(interpretation)
        ),
    )


# ==============================================================================
# ENVIRONMENT SETTINGS
# ==============================================================================

class CashSettings(BaseSettings):
    """
    Defaults read from the environment (CASH_UNITS_PER_WHOLE, CASH_ROUNDING,
    CASH_VAT_RATE, CASH_VAT_INCLUDED, CASH_INTERPRETATION, CASH_CURRENCY).
    """

    units_per_whole: int = DEFAULT_UNITS_PER_WHOLE
    rounding: str = DEFAULT_ROUNDING.name
    currency: Optional[str] = None
    vat_rate: Decimal = DEFAULT_VAT_RATE
    vat_included: str = DEFAULT_VAT_STATUS.value
    interpretation: str = DEFAULT_INTERPRETATION.value
    log_level: str = "INFO"
    log_json: bool = False

    model_config = SettingsConfigDict(
        env_prefix="CASH_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    def to_defaults(self) -> Defaults:
        return Defaults(
            units_per_whole=self.units_per_whole,
            rounding=self.rounding,
            currency=Currency.from_code(self.currency) if self.currency else None,
            vat_rate=self.vat_rate,
            vat_included=self.vat_included,
            interpretation=self.interpretation,
        )


def load_defaults_from_env(settings: Optional[CashSettings] = None) -> Defaults:
    """Install defaults built from CashSettings (the environment by default)."""
    global _current
    settings = settings or CashSettings()
    _current = settings.to_defaults()
    logger.debug("cash_defaults_updated", source="environment")
    return _current
