# assortment/utils/money.py

from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

Amount = Union[int, float, Decimal, str]

# Minor units per major unit (cents)
MINOR_UNITS = 100
_MINOR_EXP = Decimal(1)


def _as_decimal(amount: Amount) -> Decimal:
    # str() first so binary float noise (1.005 -> 1.00499...) does not leak in
    if isinstance(amount, Decimal):
        return amount
    return Decimal(str(amount))


def is_valid_amount(amount: Amount) -> bool:
    """True for finite, non-negative amounts (the only ones the solver accepts)."""
    try:
        value = _as_decimal(amount)
    except (ArithmeticError, ValueError):
        return False
    return value.is_finite() and value >= 0


def quantize(amount: Amount) -> int:
    """Convert a major-unit amount to integer minor units, rounding half-up.

    2.345 -> 235, 2.344 -> 234, 0.005 -> 1.

    Callers reject negative and non-finite values before reaching here.
    """
    return int((_as_decimal(amount) * MINOR_UNITS).quantize(_MINOR_EXP, rounding=ROUND_HALF_UP))


def to_major(minor: int) -> Decimal:
    """Inverse boundary conversion: minor units -> Decimal major units (two places)."""
    return (Decimal(minor) / MINOR_UNITS).quantize(Decimal("0.01"))


def to_float(minor: int) -> float:
    return float(to_major(minor))


def net_from_gross(gross: Amount, vat_rate: float) -> int:
    """Tax-exclusive amount (minor units) for a tax-inclusive total."""
    if not math.isfinite(float(vat_rate)) or vat_rate < 0:
        raise ValueError(f"vat_rate must be a finite non-negative number, got {vat_rate!r}")
    net = _as_decimal(gross) / (Decimal(1) + _as_decimal(vat_rate))
    return quantize(net)


def vat_on(net_minor: int, vat_rate: float) -> int:
    """VAT owed on a net amount, both in minor units, rounded half-up."""
    vat = Decimal(net_minor) * _as_decimal(vat_rate)
    return int(vat.quantize(_MINOR_EXP, rounding=ROUND_HALF_UP))


__all__ = ["MINOR_UNITS", "is_valid_amount", "quantize", "to_major", "to_float", "net_from_gross", "vat_on"]
