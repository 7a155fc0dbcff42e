"""Record types shared by every part of the finance tracker.

All monetary amounts are stored in the base currency (NTD).  Display
currencies are a view transform handled by :mod:`finance_tracker.currency`.
The records are immutable; the analytics never mutate them and the store
replaces whole lists when something changes.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Optional, Tuple

# Closed vocabularies
FREQUENCIES = ("weekly", "monthly", "quarterly", "yearly")
INCOME_TYPES = ("cash", "accrued")
SAVING_TYPES = ("balance", "goal")
TARGET_TYPES = ("income", "expense", "savings")
TARGET_PERIODS = FREQUENCIES

EXPENSE_CATEGORIES: Dict[str, str] = {
    "food": "Food",
    "lifestyle": "Lifestyle",
    "family": "Family",
    "misc": "Misc",
}
FIXED_EXPENSE_CATEGORIES: Dict[str, str] = {
    "housing": "Housing",
    "utilities": "Utilities",
    "transportation": "Transportation",
    "health": "Health",
    "financial-obligations": "Financial Obligations",
    "taxes": "Taxes",
}
DEFAULT_EXPENSE_CATEGORY = "misc"
DEFAULT_FIXED_EXPENSE_CATEGORY = "housing"


@dataclass(frozen=True)
class Expense:
    id: str
    date: date
    description: str
    amount: float
    category: str = DEFAULT_EXPENSE_CATEGORY
    needs_check: bool = False
    goal_id: Optional[str] = None
    task_id: Optional[str] = None


@dataclass(frozen=True)
class Income:
    id: str
    date: date
    source: str
    amount: float
    income_type: str = "cash"
    note: str = ""


@dataclass(frozen=True)
class Saving:
    """A savings balance snapshot, not a delta.

    ``balance`` entries are measured savings on that day; ``goal`` entries
    hold the desired savings value kept in step with the monthly savings
    target.
    """

    id: str
    date: date
    amount: float
    saving_type: str = "balance"
    note: str = ""


@dataclass(frozen=True)
class FixedExpense:
    id: str
    description: str
    amount: float
    frequency: str = "monthly"
    is_active: bool = True
    category: str = DEFAULT_FIXED_EXPENSE_CATEGORY


@dataclass(frozen=True)
class GoalItem:
    """A pre-task, post-task or post-dream attached to a goal."""

    id: str
    title: str
    completed: bool = False
    linked_expense_id: Optional[str] = None


@dataclass(frozen=True)
class Goal:
    id: str
    title: str
    deadline: Optional[date] = None
    completed: bool = False
    category: Optional[str] = None
    linked_expense_id: Optional[str] = None
    pre_tasks: Tuple[GoalItem, ...] = ()
    post_tasks: Tuple[GoalItem, ...] = ()
    post_dreams: Tuple[GoalItem, ...] = ()
    created_at: Optional[datetime] = None

    @property
    def items(self) -> Tuple[GoalItem, ...]:
        return self.pre_tasks + self.post_tasks + self.post_dreams


@dataclass(frozen=True)
class FinancialTarget:
    id: str
    type: str
    amount: float  # base currency, always > 0
    currency: str  # currency the target was defined in
    period: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Snapshot:
    """A consistent view of every record collection at one logical instant."""

    expenses: Tuple[Expense, ...] = ()
    incomes: Tuple[Income, ...] = ()
    savings: Tuple[Saving, ...] = ()
    fixed_expenses: Tuple[FixedExpense, ...] = ()
    goals: Tuple[Goal, ...] = ()
    targets: Tuple[FinancialTarget, ...] = ()
    priority_goal_id: Optional[str] = None
