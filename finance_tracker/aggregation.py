"""Period-based aggregation of dated records.

Records are grouped into buckets keyed by calendar day (``YYYY-MM-DD``)
or calendar month (``YYYY-MM``).  Flows (expenses, incomes) are summed per
bucket; savings are balance snapshots, so a bucket reports the latest
snapshot rather than a sum.

Two net-flow definitions exist and are kept apart on purpose:

* :func:`monthly_summary` subtracts the monthly equivalent of active fixed
  expenses: ``income - expenses - fixed``.
* :func:`period_totals` reports ``income - expenses`` for whatever records
  it is given (typically the time-filtered set).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from itertools import chain
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from .models import Expense, FixedExpense, Income, Saving
from .recurring import fixed_monthly_total
from .time_periods import MONTH_NAMES

FRAME_COLUMNS = ['date', 'amount', 'position']
BUCKETS = ('day', 'month')


@dataclass(frozen=True)
class MonthSummary:
    month: str  # YYYY-MM
    display_month: str  # "January 2026"
    total_income: float
    total_expenses: float
    fixed_expenses_monthly: float
    savings_balance: Optional[float]
    net_flow: float


@dataclass(frozen=True)
class PeriodTotals:
    income: float
    expenses: float
    net_flow: float


def records_frame(records: Iterable) -> pd.DataFrame:
    """Build a frame of ISO date, amount and original list position.

    The position column keeps insertion order available once rows have
    been sorted or grouped.
    """
    rows = [
        {'date': record.date.isoformat(), 'amount': float(record.amount), 'position': index}
        for index, record in enumerate(records)
    ]
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)


def bucket_key(day: date, bucket: str = 'day') -> str:
    """Return the bucket a calendar day belongs to.

    Example:
        >>> bucket_key(date(2026, 1, 5), 'month')
        '2026-01'
    """
    if bucket == 'day':
        return day.isoformat()
    if bucket == 'month':
        return day.strftime('%Y-%m')
    raise ValueError(f"Unsupported bucket '{bucket}'. Expected one of {BUCKETS}.")


def _bucket_series(frame: pd.DataFrame, bucket: str) -> pd.Series:
    if bucket == 'day':
        return frame['date']
    if bucket == 'month':
        return frame['date'].str[:7]
    raise ValueError(f"Unsupported bucket '{bucket}'. Expected one of {BUCKETS}.")


def sum_by_bucket(records: Iterable, bucket: str = 'day') -> Dict[str, float]:
    """Sum record amounts per bucket.  Buckets without records are absent."""
    frame = records_frame(records)
    if frame.empty:
        return {}
    totals = frame.groupby(_bucket_series(frame, bucket))['amount'].sum()
    return {str(key): float(value) for key, value in totals.items()}


def daily_totals(records: Iterable) -> Dict[str, float]:
    return sum_by_bucket(records, 'day')


def latest_by_bucket(records: Iterable, bucket: str = 'month') -> Dict[str, float]:
    """Pick the latest-dated record's amount in each bucket.

    When several records share the latest date, the one that appears last
    in ``records`` wins.
    """
    frame = records_frame(records)
    if frame.empty:
        return {}
    frame['bucket'] = _bucket_series(frame, bucket)
    ordered = frame.sort_values(['date', 'position'])
    latest = ordered.groupby('bucket')['amount'].last()
    return {str(key): float(value) for key, value in latest.items()}


def carry_forward(dates: Sequence[str], balances: Mapping[str, float]) -> List[Optional[float]]:
    """Fill dates lacking a balance with the most recent earlier balance.

    ``dates`` must be strictly increasing.  Dates before the first known
    balance stay ``None``.
    """
    if not dates:
        return []
    series = pd.Series([balances.get(day) for day in dates], index=list(dates), dtype=float).ffill()
    return [None if pd.isna(value) else float(value) for value in series]


def balance_savings(savings: Iterable[Saving]) -> List[Saving]:
    return [saving for saving in savings if saving.saving_type == 'balance']


def goal_savings(savings: Iterable[Saving]) -> List[Saving]:
    return [saving for saving in savings if saving.saving_type == 'goal']


def _display_month(month: str) -> str:
    year, month_number = month.split('-')
    return f"{MONTH_NAMES[int(month_number) - 1]} {year}"


def monthly_summary(
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    savings: Iterable[Saving],
    fixed_expenses: Iterable[FixedExpense] = (),
) -> List[MonthSummary]:
    """Summarise income, expenses, fixed costs and savings per calendar month.

    Every month in which any expense, income or saving is dated gets exactly
    one entry, even if some of the lists have nothing that month (those
    totals report 0).  The savings balance is the latest ``balance``-type
    snapshot of the month, or ``None`` if there is none.  The fixed figure
    is the same for every month.  Results are sorted most recent first.
    """
    expenses = list(expenses)
    incomes = list(incomes)
    savings = list(savings)
    fixed_monthly = fixed_monthly_total(fixed_expenses)

    months = sorted(
        {bucket_key(record.date, 'month') for record in chain(expenses, incomes, savings)},
        reverse=True,
    )
    income_by_month = sum_by_bucket(incomes, 'month')
    expenses_by_month = sum_by_bucket(expenses, 'month')
    balance_by_month = latest_by_bucket(balance_savings(savings), 'month')

    summaries = []
    for month in months:
        total_income = income_by_month.get(month, 0.0)
        total_expenses = expenses_by_month.get(month, 0.0)
        summaries.append(MonthSummary(
            month=month,
            display_month=_display_month(month),
            total_income=total_income,
            total_expenses=total_expenses,
            fixed_expenses_monthly=fixed_monthly,
            savings_balance=balance_by_month.get(month),
            net_flow=total_income - total_expenses - fixed_monthly,
        ))
    return summaries


def period_totals(expenses: Iterable[Expense], incomes: Iterable[Income]) -> PeriodTotals:
    """Total income and expenses of the given (usually period-filtered) records."""
    income = float(sum(record.amount for record in incomes))
    spent = float(sum(record.amount for record in expenses))
    return PeriodTotals(income=income, expenses=spent, net_flow=income - spent)
