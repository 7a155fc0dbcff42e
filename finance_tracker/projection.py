"""Cash-flow trend series and forward projections.

The projector turns dated expenses, incomes and savings balances into a
cumulative daily series and extrapolates it over a fixed horizon using
average daily rates.  Projected points are rounded half up to whole base
currency units.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from .aggregation import balance_savings, carry_forward, daily_totals, latest_by_bucket
from .config import PROJECTION_HORIZON_DAYS
from .models import Expense, Income, Saving


@dataclass(frozen=True)
class TrendPoint:
    date: str
    label: str
    expense_cumulative: Optional[float] = None
    future_expense: Optional[float] = None
    income_cumulative: Optional[float] = None
    future_income: Optional[float] = None
    savings: Optional[float] = None
    projected_expense: Optional[int] = None
    projected_income: Optional[int] = None
    projected_savings: Optional[int] = None

    @property
    def is_projection(self) -> bool:
        return self.projected_expense is not None


@dataclass(frozen=True)
class CashFlowTrend:
    points: Tuple[TrendPoint, ...]
    avg_daily_expense: float
    avg_daily_income: float
    avg_daily_savings_growth: float
    expense_projection: int
    income_projection: int
    savings_projection: int
    net_projection: int

    @classmethod
    def empty(cls) -> 'CashFlowTrend':
        return cls((), 0.0, 0.0, 0.0, 0, 0, 0, 0)


@dataclass(frozen=True)
class SpendingPoint:
    date: str
    label: str
    daily: float
    cumulative: float


@dataclass(frozen=True)
class ProjectedPoint:
    date: str
    label: str
    projected: int


@dataclass(frozen=True)
class SpendingTrend:
    points: Tuple[SpendingPoint, ...]
    projected: Tuple[ProjectedPoint, ...]
    avg_daily: float
    projection_30_days: int


def _label(day: date) -> str:
    return day.strftime('%m/%d')


def _span_days(first: str, last: str) -> int:
    return (date.fromisoformat(last) - date.fromisoformat(first)).days


def round_half_up(values: np.ndarray) -> np.ndarray:
    return np.floor(values + 0.5)


def extrapolate(last_value: float, daily_rate: float, horizon: int = PROJECTION_HORIZON_DAYS) -> np.ndarray:
    """Project ``last_value + daily_rate * i`` for i = 1..horizon, rounded."""
    steps = np.arange(1, horizon + 1, dtype=float)
    return round_half_up(last_value + daily_rate * steps)


def average_daily_rate(daily: Mapping[str, float], today: date) -> float:
    """Average per-day amount over entries dated on or before ``today``.

    The day count runs inclusively from the earliest to the latest such
    entry and is never less than one.  Future-dated entries are ignored.
    """
    cutoff = today.isoformat()
    past = sorted(day for day in daily if day <= cutoff)
    if not past:
        return 0.0
    span = max(1, _span_days(past[0], past[-1]) + 1)
    return float(sum(daily[day] for day in past)) / span


def average_savings_growth(balances: Mapping[str, float]) -> float:
    """Average daily change between the earliest and latest balance snapshot.

    Needs at least two distinct dates; otherwise growth is zero.
    """
    dates = sorted(balances)
    if len(dates) < 2:
        return 0.0
    span = max(1, _span_days(dates[0], dates[-1]))
    return (balances[dates[-1]] - balances[dates[0]]) / span


def project_cash_flow(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    savings: Iterable[Saving],
    today: Optional[date] = None,
    horizon: int = PROJECTION_HORIZON_DAYS,
) -> CashFlowTrend:
    """Build the cumulative cash-flow series and its forward projection.

    One point is produced per distinct date across the three inputs.
    Cumulative expenses and incomes dated after ``today`` are reported on
    the ``future_*`` fields instead of the historical ones.  Savings use
    ``balance`` snapshots only and are carried forward across dates without
    a snapshot.  ``horizon`` projected points follow the last date.
    """
    expenses = list(expenses)
    incomes = list(incomes)
    balances_source = balance_savings(savings)
    if not expenses and not incomes and not balances_source:
        return CashFlowTrend.empty()

    today = today or date.today()
    cutoff = today.isoformat()

    daily_expenses = daily_totals(expenses)
    daily_incomes = daily_totals(incomes)
    balances = latest_by_bucket(balances_source, 'day')

    dates = sorted(set(daily_expenses) | set(daily_incomes) | set(balances))
    cumulative = pd.DataFrame(
        {
            'expense': pd.Series(daily_expenses, dtype=float),
            'income': pd.Series(daily_incomes, dtype=float),
        },
        index=dates,
    ).fillna(0.0).cumsum()
    savings_series = carry_forward(dates, balances)

    points: List[TrendPoint] = []
    for day, saved in zip(dates, savings_series):
        spent = float(cumulative.at[day, 'expense'])
        earned = float(cumulative.at[day, 'income'])
        is_future = day > cutoff
        points.append(TrendPoint(
            date=day,
            label=_label(date.fromisoformat(day)),
            expense_cumulative=None if is_future else spent,
            future_expense=spent if is_future else None,
            income_cumulative=None if is_future else earned,
            future_income=earned if is_future else None,
            savings=saved,
        ))

    avg_expense = average_daily_rate(daily_expenses, today)
    avg_income = average_daily_rate(daily_incomes, today)
    avg_savings = average_savings_growth(balances)

    last_expense = float(cumulative['expense'].iloc[-1])
    last_income = float(cumulative['income'].iloc[-1])
    last_savings = savings_series[-1] or 0.0

    projected_expense = extrapolate(last_expense, avg_expense, horizon)
    projected_income = extrapolate(last_income, avg_income, horizon)
    projected_savings = extrapolate(last_savings, avg_savings, horizon)

    last_day = date.fromisoformat(dates[-1])
    for offset in range(horizon):
        day = last_day + timedelta(days=offset + 1)
        points.append(TrendPoint(
            date=day.isoformat(),
            label=_label(day),
            projected_expense=int(projected_expense[offset]),
            projected_income=int(projected_income[offset]),
            projected_savings=int(projected_savings[offset]),
        ))

    expense_projection = int(round_half_up(np.float64(last_expense + avg_expense * horizon)))
    income_projection = int(round_half_up(np.float64(last_income + avg_income * horizon)))
    savings_projection = int(round_half_up(np.float64(last_savings + avg_savings * horizon)))

    return CashFlowTrend(
        points=tuple(points),
        avg_daily_expense=avg_expense,
        avg_daily_income=avg_income,
        avg_daily_savings_growth=avg_savings,
        expense_projection=expense_projection,
        income_projection=income_projection,
        savings_projection=savings_projection,
        net_projection=income_projection - expense_projection,
    )


def project_spending(expenses: Iterable[Expense], horizon: int = PROJECTION_HORIZON_DAYS) -> SpendingTrend:
    """Expense-only trend: daily and cumulative spend plus a projection.

    Unlike :func:`project_cash_flow` the average here uses every expense,
    future-dated ones included, over the full date span.
    """
    daily = daily_totals(expenses)
    if not daily:
        return SpendingTrend((), (), 0.0, 0)

    dates = sorted(daily)
    running = pd.Series([daily[day] for day in dates], index=dates, dtype=float).cumsum()
    points = tuple(
        SpendingPoint(
            date=day,
            label=_label(date.fromisoformat(day)),
            daily=daily[day],
            cumulative=float(running[day]),
        )
        for day in dates
    )

    span = max(1, _span_days(dates[0], dates[-1]) + 1)
    avg_daily = float(sum(daily.values())) / span
    last_cumulative = float(running.iloc[-1])
    values = extrapolate(last_cumulative, avg_daily, horizon)
    last_day = date.fromisoformat(dates[-1])
    projected = []
    for offset, value in enumerate(values):
        day = last_day + timedelta(days=offset + 1)
        projected.append(ProjectedPoint(date=day.isoformat(), label=_label(day), projected=int(value)))

    return SpendingTrend(
        points=points,
        projected=tuple(projected),
        avg_daily=avg_daily,
        projection_30_days=int(round_half_up(np.float64(last_cumulative + avg_daily * horizon))),
    )
