"""Personal finance analytics over a snapshot of tracker records.

:class:`FinanceAnalytics` is the entry point used by the presentation
layer.  It applies the active time filter to expenses, incomes and
savings, then hands the filtered lists to the aggregator, projector and
flow decomposition.  Fixed expenses, goals and targets are never
filtered.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import List, Optional

from . import aggregation, projection, recurring, targets
from .flow import OVERVIEW, FlowGraph, build_flow
from .models import FinancialTarget, Snapshot
from .time_periods import TimePeriod, filter_by_period, target_period_for

logger = logging.getLogger(__name__)


class FinanceAnalytics:
    """Derived views for one snapshot, optionally limited to a time period."""

    def __init__(self, snapshot: Snapshot, period: Optional[TimePeriod] = None, today: Optional[date] = None):
        """Initialize with a record snapshot.

        Args:
            snapshot: Consistent set of records as of one logical instant
            period: Active time filter, or None for all records
            today: Date used to separate historical from future entries
        """
        self.snapshot = snapshot
        self.period = period
        self.today = today or date.today()
        self.expenses = filter_by_period(snapshot.expenses, period)
        self.incomes = filter_by_period(snapshot.incomes, period)
        self.savings = filter_by_period(snapshot.savings, period)
        if period is not None:
            logger.debug(
                "Filtered to %s: %d expenses, %d incomes, %d savings",
                period.label,
                len(self.expenses),
                len(self.incomes),
                len(self.savings),
            )

    def monthly_summary(self) -> List[aggregation.MonthSummary]:
        return aggregation.monthly_summary(
            self.expenses, self.incomes, self.savings, self.snapshot.fixed_expenses
        )

    def period_totals(self) -> aggregation.PeriodTotals:
        return aggregation.period_totals(self.expenses, self.incomes)

    def fixed_monthly_total(self) -> float:
        return recurring.fixed_monthly_total(self.snapshot.fixed_expenses)

    def cash_flow_trend(self) -> projection.CashFlowTrend:
        return projection.project_cash_flow(self.expenses, self.incomes, self.savings, today=self.today)

    def spending_trend(self) -> projection.SpendingTrend:
        return projection.project_spending(self.expenses)

    def flow(self, level: str = OVERVIEW) -> FlowGraph:
        """Flow graph for a drill-down level.

        The one-time expense total of the expense-detail level is computed
        from every expense in the snapshot, not only the filtered ones.
        """
        return build_flow(
            level,
            self.expenses,
            self.incomes,
            self.savings,
            self.snapshot.goals,
            self.snapshot.fixed_expenses,
            all_expenses=self.snapshot.expenses,
        )

    @property
    def target_period(self) -> str:
        return target_period_for(self.period)

    def relevant_targets(self, currency: str) -> List[FinancialTarget]:
        return targets.relevant_targets(self.snapshot.targets, self.target_period, currency)

    def target_value(self, target_type: str, currency: str) -> Optional[float]:
        return targets.target_value(self.snapshot.targets, target_type, self.target_period, currency)
