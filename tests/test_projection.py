from datetime import date

import numpy as np
import pytest

from finance_tracker.models import Expense, Income, Saving
from finance_tracker.projection import (
    CashFlowTrend,
    average_daily_rate,
    average_savings_growth,
    extrapolate,
    project_cash_flow,
    project_spending,
)

TODAY = date(2026, 10, 18)


def _expenses():
    return [
        Expense('e1', date(2026, 1, 1), 'Lunch', 100.0),
        Expense('e2', date(2026, 1, 2), 'Dinner', 100.0),
    ]


def test_projection_continues_from_last_cumulative_value():
    trend = project_cash_flow(_expenses(), [], [], today=TODAY)

    history = [p for p in trend.points if not p.is_projection]
    projected = [p for p in trend.points if p.is_projection]
    assert [p.expense_cumulative for p in history] == [100.0, 200.0]
    assert len(projected) == 30
    assert projected[0].date == '2026-01-03'
    assert projected[0].label == '01/03'
    assert projected[0].projected_expense == 300
    assert projected[-1].projected_expense == 3200
    assert trend.avg_daily_expense == pytest.approx(100)
    assert trend.expense_projection == 3200
    assert trend.income_projection == 0
    assert trend.net_projection == -3200


def test_future_entries_use_separate_series():
    expenses = [
        Expense('e1', date(2026, 1, 1), 'Rent', 100.0),
        Expense('e2', date(2026, 1, 5), 'Planned', 50.0),
    ]
    trend = project_cash_flow(expenses, [], [], today=date(2026, 1, 1))
    first, second = trend.points[:2]

    assert first.expense_cumulative == 100
    assert first.future_expense is None
    assert second.expense_cumulative is None
    assert second.future_expense == 150
    # the rate ignores future entries but the projection starts from them
    assert trend.avg_daily_expense == pytest.approx(100)
    assert trend.points[2].projected_expense == 250


def test_savings_carry_forward_and_growth():
    incomes = [Income('i1', date(2026, 1, 2), 'Salary', 900.0)]
    savings = [
        Saving('s1', date(2026, 1, 1), 1000.0),
        Saving('s2', date(2026, 1, 4), 1300.0),
        Saving('g1', date(2026, 1, 3), 99999.0, saving_type='goal'),
    ]
    trend = project_cash_flow([], incomes, savings, today=TODAY)
    history = [p for p in trend.points if not p.is_projection]

    assert [p.date for p in history] == ['2026-01-01', '2026-01-02', '2026-01-04']
    assert [p.savings for p in history] == [1000.0, 1000.0, 1300.0]
    assert [p.income_cumulative for p in history] == [0.0, 900.0, 900.0]
    assert trend.avg_daily_savings_growth == pytest.approx(100)
    assert trend.savings_projection == 4300


def test_empty_inputs_give_empty_trend():
    assert project_cash_flow([], [], [], today=TODAY) == CashFlowTrend.empty()
    goal_only = [Saving('g1', date(2026, 1, 3), 500.0, saving_type='goal')]
    assert project_cash_flow([], [], goal_only, today=TODAY).points == ()


def test_average_daily_rate_counts_inclusive_days():
    daily = {'2026-01-01': 100.0, '2026-01-10': 200.0, '2026-12-01': 900.0}
    assert average_daily_rate(daily, date(2026, 2, 1)) == pytest.approx(30)
    assert average_daily_rate({'2026-01-01': 70.0}, date(2026, 2, 1)) == 70
    assert average_daily_rate(daily, date(2025, 1, 1)) == 0


def test_savings_growth_needs_two_dates():
    assert average_savings_growth({'2026-01-01': 500.0}) == 0
    assert average_savings_growth({'2026-01-01': 500.0, '2026-01-11': 400.0}) == pytest.approx(-10)


def test_extrapolate_rounds_half_up():
    np.testing.assert_array_equal(extrapolate(10, 0.25, horizon=2), [10, 11])
    np.testing.assert_array_equal(extrapolate(0, -0.5, horizon=1), [0])


def test_spending_trend_averages_all_expenses():
    expenses = [
        Expense('e1', date(2026, 1, 1), 'A', 100.0),
        Expense('e2', date(2026, 1, 10), 'B', 200.0),
    ]
    trend = project_spending(expenses)

    assert [p.cumulative for p in trend.points] == [100.0, 300.0]
    assert trend.avg_daily == pytest.approx(30)
    assert trend.projected[0].projected == 330
    assert trend.projected[0].date == '2026-01-11'
    assert trend.projection_30_days == 1200


def test_spending_trend_empty():
    trend = project_spending([])
    assert trend.points == ()
    assert trend.projection_30_days == 0
