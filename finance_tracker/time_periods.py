"""Hierarchical time windows used to filter records.

A year is split into four quarters, each quarter into three calendar
months, and each month into weeks.  Weeks start on the 1st of the month
and run for seven days; the final week is cut short at the month's last
day so it never spills into the next month.  All bounds are inclusive
calendar days.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional, Tuple, TypeVar

MONTH_NAMES = tuple(calendar.month_name[1:])
QUARTER_MONTHS = ((1, 2, 3), (4, 5, 6), (7, 8, 9), (10, 11, 12))

R = TypeVar('R')


@dataclass(frozen=True)
class TimePeriod:
    type: str  # 'year' | 'quarter' | 'month' | 'week'
    year: int
    label: str
    start_date: date
    end_date: date
    quarter: Optional[int] = None
    month: Optional[int] = None
    week: Optional[int] = None

    @property
    def key(self) -> Tuple[str, int, Optional[int], Optional[int], Optional[int]]:
        return (self.type, self.year, self.quarter, self.month, self.week)

    @property
    def span_days(self) -> int:
        return (self.end_date - self.start_date).days

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class PeriodNode:
    period: TimePeriod
    children: Tuple['PeriodNode', ...] = ()

    def walk(self) -> Iterator[TimePeriod]:
        """Yield this node's period followed by every descendant, depth first."""
        yield self.period
        for child in self.children:
            yield from child.walk()


def _last_day(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def year_period(year: int) -> TimePeriod:
    return TimePeriod(
        type='year',
        year=year,
        label=str(year),
        start_date=date(year, 1, 1),
        end_date=date(year, 12, 31),
    )


def quarter_period(year: int, quarter: int) -> TimePeriod:
    months = QUARTER_MONTHS[quarter - 1]
    return TimePeriod(
        type='quarter',
        year=year,
        quarter=quarter,
        label=f"Q{quarter} {year}",
        start_date=date(year, months[0], 1),
        end_date=_last_day(year, months[-1]),
    )


def month_period(year: int, month: int) -> TimePeriod:
    return TimePeriod(
        type='month',
        year=year,
        quarter=(month - 1) // 3 + 1,
        month=month,
        label=f"{MONTH_NAMES[month - 1]} {year}",
        start_date=date(year, month, 1),
        end_date=_last_day(year, month),
    )


def weeks_in_month(year: int, month: int) -> List[TimePeriod]:
    """Split a calendar month into consecutive, non-overlapping weeks.

    Example:
        >>> [w.end_date.day for w in weeks_in_month(2026, 2)]
        [7, 14, 21, 28]
    """
    last_day = _last_day(year, month)
    weeks: List[TimePeriod] = []
    start = date(year, month, 1)
    number = 1
    while start <= last_day:
        end = min(start + timedelta(days=6), last_day)
        weeks.append(TimePeriod(
            type='week',
            year=year,
            quarter=(month - 1) // 3 + 1,
            month=month,
            week=number,
            label=f"Week {number}, {MONTH_NAMES[month - 1]} {year}",
            start_date=start,
            end_date=end,
        ))
        start = end + timedelta(days=1)
        number += 1
    return weeks


def build_period_tree(year: int) -> PeriodNode:
    """Build the year → quarter → month → week tree for ``year``."""
    quarters = []
    for quarter, months in enumerate(QUARTER_MONTHS, start=1):
        month_nodes = tuple(
            PeriodNode(
                period=month_period(year, month),
                children=tuple(PeriodNode(week) for week in weeks_in_month(year, month)),
            )
            for month in months
        )
        quarters.append(PeriodNode(quarter_period(year, quarter), month_nodes))
    return PeriodNode(year_period(year), tuple(quarters))


def is_in_period(day: date, period: Optional[TimePeriod]) -> bool:
    """Return True if ``day`` falls inside ``period``; no period means no filter."""
    if period is None:
        return True
    return period.contains(day)


def filter_by_period(records: Iterable[R], period: Optional[TimePeriod]) -> List[R]:
    """Keep the dated records that fall inside ``period``."""
    return [record for record in records if is_in_period(record.date, period)]


def select_period(current: Optional[TimePeriod], chosen: TimePeriod) -> Optional[TimePeriod]:
    """Apply a click on ``chosen``: selecting the active period clears it."""
    if current is not None and current.key == chosen.key:
        return None
    return chosen


def target_period_for(period: Optional[TimePeriod]) -> str:
    """Map a selected window onto the target period shown alongside it."""
    if period is None:
        return 'monthly'
    span = period.span_days
    if span <= 7:
        return 'weekly'
    if span <= 31:
        return 'monthly'
    if span <= 92:
        return 'quarterly'
    return 'yearly'
