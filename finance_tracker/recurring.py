"""Helpers for normalising recurring (fixed) expenses to monthly figures."""

from __future__ import annotations

from typing import Dict, Iterable, List, Union

from .models import FixedExpense

WEEKS_PER_MONTH = 4.33

# How many months one billing cycle covers
MONTHS_PER_CYCLE: Dict[str, int] = {
    'monthly': 1,
    'quarterly': 3,
    'yearly': 12,
}


def monthly_equivalent(amount: Union[float, int], frequency: str) -> float:
    """Return the monthly cost of a recurring amount.

    Weekly amounts are scaled by :data:`WEEKS_PER_MONTH`; longer cycles are
    divided by the number of months they cover.  Unknown frequencies are
    treated as monthly.

    Example:
        >>> monthly_equivalent(1200, 'yearly')
        100.0
    """
    if frequency == 'weekly':
        return amount * WEEKS_PER_MONTH
    return amount / MONTHS_PER_CYCLE.get(frequency, 1)


def active_fixed_expenses(fixed_expenses: Iterable[FixedExpense]) -> List[FixedExpense]:
    return [item for item in fixed_expenses if item.is_active]


def fixed_monthly_total(fixed_expenses: Iterable[FixedExpense]) -> float:
    """Sum the monthly equivalents of all active fixed expenses.

    The figure does not depend on the month it is reported against.
    """
    return float(sum(
        monthly_equivalent(item.amount, item.frequency)
        for item in active_fixed_expenses(fixed_expenses)
    ))


def fixed_total(fixed_expenses: Iterable[FixedExpense]) -> float:
    """Sum the raw amounts of active fixed expenses, ignoring frequency."""
    return float(sum(item.amount for item in active_fixed_expenses(fixed_expenses)))
