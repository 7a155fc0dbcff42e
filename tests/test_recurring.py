import pytest

from finance_tracker.models import FixedExpense
from finance_tracker.recurring import fixed_monthly_total, fixed_total, monthly_equivalent


def test_monthly_equivalent_by_frequency():
    assert monthly_equivalent(1200, 'yearly') == 100
    assert monthly_equivalent(300, 'quarterly') == 100
    assert monthly_equivalent(500, 'monthly') == 500
    assert monthly_equivalent(100, 'weekly') == pytest.approx(433.0)


def test_unknown_frequency_counts_as_monthly():
    assert monthly_equivalent(80, 'fortnightly') == 80


def test_fixed_totals_skip_inactive_items():
    items = [
        FixedExpense('f1', 'Rent', 3000),
        FixedExpense('f2', 'Insurance', 1200, frequency='yearly'),
        FixedExpense('f3', 'Gym', 999, is_active=False),
    ]
    assert fixed_monthly_total(items) == pytest.approx(3100)
    assert fixed_total(items) == pytest.approx(4200)
    assert fixed_monthly_total([]) == 0
