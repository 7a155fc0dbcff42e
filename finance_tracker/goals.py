"""Goal helpers: active-goal limit, deadline countdowns and the priority goal."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, List, Optional, Set

from .models import Expense, Goal

MAX_ACTIVE_GOALS = 10


@dataclass(frozen=True)
class Countdown:
    days: int
    label: str  # 'overdue' | 'today' | 'days left'
    urgency: str  # 'high' | 'medium' | 'low'


def active_goals(goals: Iterable[Goal]) -> List[Goal]:
    """Goals that are not completed and have a non-empty title."""
    return [goal for goal in goals if not goal.completed and goal.title]


def can_add_goal(goals: Iterable[Goal]) -> bool:
    return len(active_goals(goals)) < MAX_ACTIVE_GOALS


def goal_countdown(deadline: Optional[date], today: Optional[date] = None) -> Optional[Countdown]:
    """Days until (or past) a goal deadline.

    Example:
        >>> goal_countdown(date(2026, 1, 10), today=date(2026, 1, 5))
        Countdown(days=5, label='days left', urgency='high')
    """
    if deadline is None:
        return None
    today = today or date.today()
    days = (deadline - today).days
    if days < 0:
        return Countdown(abs(days), 'overdue', 'high')
    if days == 0:
        return Countdown(0, 'today', 'high')
    if days <= 7:
        return Countdown(days, 'days left', 'high')
    if days <= 30:
        return Countdown(days, 'days left', 'medium')
    return Countdown(days, 'days left', 'low')


def toggle_priority(priority_goal_id: Optional[str], goal_id: str) -> Optional[str]:
    """Toggle ``goal_id`` as the single top-priority goal.

    Returns the new priority goal id: None when the goal already held
    priority, otherwise ``goal_id`` (replacing any previous holder).
    """
    if priority_goal_id == goal_id:
        return None
    return goal_id


def linked_expense_ids(goals: Iterable[Goal]) -> Set[str]:
    """Ids of expenses auto-created for goals or their tasks and dreams."""
    ids: Set[str] = set()
    for goal in goals:
        if goal.linked_expense_id:
            ids.add(goal.linked_expense_id)
        ids.update(item.linked_expense_id for item in goal.items if item.linked_expense_id)
    return ids


def expenses_to_cascade(goal: Goal, expenses: Iterable[Expense]) -> List[Expense]:
    """Expenses that belong to ``goal`` and go away when it is deleted."""
    owned = linked_expense_ids([goal])
    return [expense for expense in expenses if expense.id in owned or expense.goal_id == goal.id]
