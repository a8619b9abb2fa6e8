"""Money helpers.

All amounts are Naira held as Decimal. Arithmetic stays exact until an
amount crosses the interface, where it is rounded to kobo (two places)
half-up.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any

from pydantic import BeforeValidator

ZERO = Decimal("0")
KOBO = Decimal("0.01")
RATE_PLACES = Decimal("0.0001")
MONTHS_PER_YEAR = 12


def to_decimal(value: Any) -> Decimal:
    """Convert an int/float/str/Decimal to Decimal.

    Floats go through str() so 0.025 becomes Decimal("0.025"), not the
    binary expansion.

    Raises:
        ValueError: If the value is not numeric
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValueError(f"Not a monetary amount: {value!r}")
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError):
        raise ValueError(f"Not a monetary amount: {value!r}")
    if not result.is_finite():
        raise ValueError(f"Monetary amount must be finite: {value!r}")
    return result


def round_money(amount: Decimal) -> Decimal:
    """Round to kobo, half-up (2.345 -> 2.35)."""
    return amount.quantize(KOBO, rounding=ROUND_HALF_UP)


def round_rate(rate: Decimal) -> Decimal:
    """Round a ratio to four places, half-up."""
    return rate.quantize(RATE_PLACES, rounding=ROUND_HALF_UP)


def clamp_zero(amount: Decimal) -> Decimal:
    """Negative amounts become zero."""
    return amount if amount > ZERO else ZERO


def annualize(monthly: Decimal) -> Decimal:
    return monthly * MONTHS_PER_YEAR


def monthly(annual: Decimal) -> Decimal:
    return annual / MONTHS_PER_YEAR


def format_naira(amount: Decimal) -> str:
    """Display text for an amount, e.g. ₦180,000.00."""
    return f"₦{round_money(amount):,.2f}"


def format_percent(rate: Decimal) -> str:
    """Display text for a rate, e.g. 0.025 -> 2.5%."""
    text = f"{rate * 100:.2f}".rstrip("0").rstrip(".")
    return f"{text or 0}%"


# Pydantic field type: accepts int/float/str/Decimal, stores Decimal.
Money = Annotated[Decimal, BeforeValidator(to_decimal)]
