"""Impermanent loss for a two-asset constant-product pool — pure, no I/O."""
from __future__ import annotations

import math
from typing import Any

from .models import ILResult, PoolPosition

_NUMERIC_FIELDS = (
    "amount_a",
    "amount_b",
    "initial_price_a",
    "initial_price_b",
    "current_price_a",
    "current_price_b",
)

# Price moves shown in the reference table (new ratio / initial ratio).
DEFAULT_TABLE_RATIOS: tuple[float, ...] = (
    0.25, 0.5, 0.75, 0.9, 1.0, 1.1, 1.25, 1.5, 2.0, 3.0, 5.0,
)


class InvalidInputError(ValueError):
    """Raised when a pool position cannot be evaluated."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


def _check_positive(name: str, value: Any) -> float:
    if value is None:
        raise InvalidInputError(name, "value is missing")
    # bool is an int subclass; True would otherwise pass as 1.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidInputError(name, f"expected a real number, got {value!r}")
    try:
        value = float(value)
    except OverflowError:
        raise InvalidInputError(name, "too large to represent") from None
    if not math.isfinite(value):
        raise InvalidInputError(name, f"must be finite, got {value}")
    if value <= 0:
        raise InvalidInputError(name, f"must be strictly positive, got {value}")
    return value


def _check_finite(name: str, value: float) -> float:
    if not math.isfinite(value) or value <= 0:
        raise InvalidInputError(name, f"out of representable range ({value})")
    return value


def validate_position(position: PoolPosition) -> None:
    """Raise InvalidInputError if any numeric field is missing or not > 0."""
    for name in _NUMERIC_FIELDS:
        _check_positive(name, getattr(position, name))


def compute(position: PoolPosition) -> ILResult:
    """Compare holding the deposited basket against supplying it to the pool.

    The pool is full-range with no fee accrual. ``k = amount_a * amount_b``
    is held fixed while arbitrage moves the reserve ratio to the external
    price of A in units of B:

        new_a = sqrt(k / p1),  new_b = sqrt(k * p1),  p1 = current_price_a / current_price_b

    The resulting ``impermanent_loss`` is never positive.
    """
    validate_position(position)

    a = float(position.amount_a)
    b = float(position.amount_b)
    pa0 = float(position.initial_price_a)
    pb0 = float(position.initial_price_b)
    pa1 = float(position.current_price_a)
    pb1 = float(position.current_price_b)

    initial_value = _check_finite("initial_value", a * pa0 + b * pb0)
    hodl_value = _check_finite("hodl_value", a * pa1 + b * pb1)

    price_ratio0 = _check_finite("price_ratio0", pa0 / pb0)
    price_ratio1 = _check_finite("price_ratio1", pa1 / pb1)
    price_ratio_change = _check_finite("price_ratio_change", price_ratio1 / price_ratio0)

    k = _check_finite("k", a * b)
    new_amount_a = _check_finite("new_amount_a", math.sqrt(k / price_ratio1))
    new_amount_b = _check_finite("new_amount_b", math.sqrt(k * price_ratio1))

    lp_value = _check_finite("lp_value", new_amount_a * pa1 + new_amount_b * pb1)
    impermanent_loss = lp_value - hodl_value
    impermanent_loss_percent = impermanent_loss / hodl_value * 100

    return ILResult(
        initial_value=initial_value,
        hodl_value=hodl_value,
        lp_value=lp_value,
        impermanent_loss=impermanent_loss,
        impermanent_loss_percent=impermanent_loss_percent,
        fees_needed=abs(impermanent_loss),
        price_ratio_change=price_ratio_change,
        new_amount_a=new_amount_a,
        new_amount_b=new_amount_b,
    )


def impermanent_loss_from_ratio(price_ratio_change: float) -> float:
    """Fractional IL for a balanced deposit: ``2 * sqrt(r) / (1 + r) - 1``.

    Examples:
        1.0 → 0.0
        2.0 → -0.0572 (about -5.72%)
    """
    r = _check_positive("price_ratio_change", price_ratio_change)
    return 2 * math.sqrt(r) / (1 + r) - 1


def impermanent_loss_table(
    ratios: tuple[float, ...] | list[float] = DEFAULT_TABLE_RATIOS,
) -> list[tuple[float, float]]:
    """Return ``(ratio, il_percent)`` rows for the given price-ratio moves."""
    return [(r, impermanent_loss_from_ratio(r) * 100) for r in ratios]
