"""Decimal helpers for prices, balances and commission."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from beat_market.core.errors import ValidationError

CENT = Decimal("0.01")
TENTH = Decimal("0.1")
# Largest value a Numeric(12, 2) column holds.
MAX_MONEY = Decimal("9999999999.99")


def to_money(value: Decimal | int | str | float, *, field: str = "amount") -> Decimal:
    """Convert ``value`` to a two-decimal ``Decimal``.

    Floats are converted through ``str`` so ``19.99`` stays ``19.99``.

    Raises:
        ValidationError: If the value is not a finite number or carries more
            than two decimal places, or exceeds ``MAX_MONEY`` in magnitude.
    """
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as err:
        raise ValidationError(f"{field} must be a number") from err
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number")
    if abs(amount) > MAX_MONEY:
        raise ValidationError(f"{field} must not exceed {MAX_MONEY}")
    if amount != amount.quantize(CENT):
        raise ValidationError(f"{field} must have at most two decimal places")
    return amount.quantize(CENT)


def ensure_fits(balance: Decimal, *, field: str = "balance") -> Decimal:
    """Return ``balance`` if it can be stored, else raise ``ValidationError``."""
    if balance > MAX_MONEY:
        raise ValidationError(f"{field} would exceed {MAX_MONEY}")
    return balance


def split_commission(price: Decimal, rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(commission, seller_amount)`` for a sale at ``price``.

    Commission is rounded half-up to the cent and the seller receives the
    remainder, so the two parts always add back up to ``price`` exactly.
    """
    commission = (price * rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return commission, price - commission


def average_rating(total: int, count: int) -> float:
    """Mean of ``count`` ratings summing to ``total``, rounded half-up to 0.1.

    Returns 0.0 when there are no ratings.
    """
    if count <= 0:
        return 0.0
    mean = (Decimal(total) / Decimal(count)).quantize(TENTH, rounding=ROUND_HALF_UP)
    return float(mean)
