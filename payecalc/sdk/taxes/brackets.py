"""Progressive PAYE computation over a bracket table.

Pure: the same income and brackets always give the same TaxComputation.
The table is assumed to have passed validate_config(); contiguity is not
re-checked here, but negative intermediate amounts are clamped to zero.

Bounds are inclusive integers (0-800,000 then 800,001-3,000,000), so the
part of income in a bracket is measured from the previous bracket's max,
i.e. from bracket.min - 1. This keeps tax continuous across boundaries:
tax(max + 1) - tax(max) == next_rate * 1.
"""

import logging
from decimal import Decimal
from typing import Iterable, List

from ..money import ZERO, clamp_zero, round_money, round_rate, to_decimal
from .schemas import BracketLine, TaxBracket, TaxComputation

logger = logging.getLogger(__name__)


def _bracket_floor(bracket: TaxBracket) -> Decimal:
    """Income level already covered by the brackets below this one."""
    return clamp_zero(bracket.min - 1) if bracket.min > 0 else ZERO


def compute_tax(taxable_income, brackets: Iterable[TaxBracket]) -> TaxComputation:
    """Calculate annual PAYE on taxable income.

    Args:
        taxable_income: Annual taxable income (int/float/str/Decimal)
        brackets: Ordered bracket table, last bracket unbounded

    Returns:
        TaxComputation with rounded tax, per-bracket breakdown and
        effective rate. Income <= 0 gives zero tax and an empty breakdown.
    """
    income = to_decimal(taxable_income)
    if income <= 0:
        return TaxComputation(taxable_income=round_money(income), tax=ZERO, breakdown=(), effective_rate=ZERO)

    sorted_brackets = sorted(brackets, key=lambda b: b.min)
    total = ZERO
    lines: List[BracketLine] = []

    for bracket in sorted_brackets:
        floor = _bracket_floor(bracket)
        if income <= floor:
            break

        if bracket.max is None:
            # Top bracket: everything above the floor, no upper cutoff
            portion = income - floor
        else:
            portion = clamp_zero(min(income, bracket.max) - floor)

        if portion > 0:
            tax_in_bracket = portion * bracket.rate
            total += tax_in_bracket
            lines.append(BracketLine(
                bracket=bracket,
                taxable_in_bracket=round_money(portion),
                tax_in_bracket=round_money(tax_in_bracket),
            ))
            logger.debug(f"bracket {bracket.label()} @ {bracket.rate}: {portion} -> {tax_in_bracket}")

        if bracket.max is None or income <= bracket.max:
            break

    tax = round_money(clamp_zero(total))
    return TaxComputation(
        taxable_income=round_money(income),
        tax=tax,
        breakdown=tuple(lines),
        effective_rate=round_rate(tax / income),
    )


def marginal_rate(taxable_income, brackets: Iterable[TaxBracket]) -> Decimal:
    """Rate of the bracket the last naira of income falls in."""
    income = to_decimal(taxable_income)
    rate = ZERO
    for bracket in sorted(brackets, key=lambda b: b.min):
        if income > _bracket_floor(bracket) or bracket.min == 0:
            rate = bracket.rate
        if bracket.max is None or income <= bracket.max:
            break
    return rate
