"""Flow decomposition behind the drill-down Sankey diagram.

Each level is a small graph of named nodes and weighted edges.  The
splits are presentation heuristics, not accounting identities: edge
values are clamped and estimated, so they need not add up to the node
totals.

Levels::

    overview ─┬─ income-detail
              ├─ goal-detail
              └─ expense-detail ─┬─ fixed-expense-categories
                                 └─ onetime-expense-categories
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .aggregation import balance_savings
from .config import (
    GOAL_DETAIL_LIMIT,
    GOAL_FLOW_UNIT,
    GOAL_TITLE_MAX_LENGTH,
    GOALS_FLOW_SHARE,
    SAVINGS_FLOW_SHARE,
)
from .goals import active_goals
from .models import (
    DEFAULT_EXPENSE_CATEGORY,
    DEFAULT_FIXED_EXPENSE_CATEGORY,
    EXPENSE_CATEGORIES,
    FIXED_EXPENSE_CATEGORIES,
    Expense,
    FixedExpense,
    Goal,
    Income,
    Saving,
)
from .recurring import active_fixed_expenses, fixed_total

OVERVIEW = 'overview'
INCOME_DETAIL = 'income-detail'
GOAL_DETAIL = 'goal-detail'
EXPENSE_DETAIL = 'expense-detail'
FIXED_CATEGORIES = 'fixed-expense-categories'
ONETIME_CATEGORIES = 'onetime-expense-categories'
LEVELS = (OVERVIEW, INCOME_DETAIL, GOAL_DETAIL, EXPENSE_DETAIL, FIXED_CATEGORIES, ONETIME_CATEGORIES)

# (level, clicked node) -> level shown next
DRILL_DOWN: Dict[Tuple[str, str], str] = {
    (OVERVIEW, 'income'): INCOME_DETAIL,
    (OVERVIEW, 'goals'): GOAL_DETAIL,
    (OVERVIEW, 'expenses'): EXPENSE_DETAIL,
    (EXPENSE_DETAIL, 'fixed'): FIXED_CATEGORIES,
    (EXPENSE_DETAIL, 'onetime'): ONETIME_CATEGORIES,
}


@dataclass(frozen=True)
class FlowNode:
    id: str
    name: str
    value: float


@dataclass(frozen=True)
class FlowEdge:
    source: str
    target: str
    value: float


@dataclass(frozen=True)
class FlowGraph:
    nodes: Tuple[FlowNode, ...]
    edges: Tuple[FlowEdge, ...]

    def node(self, node_id: str) -> Optional[FlowNode]:
        return next((node for node in self.nodes if node.id == node_id), None)

    def edge(self, source: str, target: str) -> Optional[FlowEdge]:
        return next((e for e in self.edges if e.source == source and e.target == target), None)


def drill_down(level: str, node_id: str) -> str:
    """Level reached by clicking ``node_id``; unknown clicks stay put."""
    return DRILL_DOWN.get((level, node_id), level)


def drill_up(level: str) -> str:
    if level in (FIXED_CATEGORIES, ONETIME_CATEGORIES):
        return EXPENSE_DETAIL
    return OVERVIEW


def _total(records: Iterable) -> float:
    return float(sum(record.amount for record in records))


def savings_balance(savings: Iterable[Saving]) -> float:
    """Sum of every ``balance`` saving, or 0 when there is none."""
    return _total(balance_savings(savings))


def overview_flow(
    expenses: Sequence[Expense],
    incomes: Sequence[Income],
    savings: Sequence[Saving],
    goals: Sequence[Goal],
) -> FlowGraph:
    total_income = _total(incomes)
    total_savings = savings_balance(savings)
    total_expenses = _total(expenses)
    goal_count = len(active_goals(goals))
    goal_linked = {goal.linked_expense_id for goal in goals if goal.linked_expense_id}
    goal_expense_total = _total(e for e in expenses if e.id in goal_linked)

    nodes = (
        FlowNode('income', 'Income', total_income),
        FlowNode('savings', 'Savings', total_savings),
        FlowNode('goals', 'Goals', float(goal_count * GOAL_FLOW_UNIT)),
        FlowNode('expenses', 'Expenses', total_expenses),
    )
    edges: List[FlowEdge] = []
    if total_income > 0:
        savings_flow = min(total_savings, total_income * SAVINGS_FLOW_SHARE)
        edges.append(FlowEdge('income', 'savings', savings_flow))
        edges.append(FlowEdge('income', 'expenses', total_income - savings_flow))
    if total_savings > 0 and goal_count > 0:
        goals_flow = min(total_savings * GOALS_FLOW_SHARE, float(goal_count * GOAL_FLOW_UNIT))
        edges.append(FlowEdge('savings', 'goals', goals_flow))
    if goal_expense_total > 0:
        edges.append(FlowEdge('goals', 'expenses', goal_expense_total))
    return FlowGraph(nodes, tuple(edges))


def income_detail_flow(incomes: Sequence[Income]) -> FlowGraph:
    cash = _total(i for i in incomes if i.income_type == 'cash')
    accrued = _total(i for i in incomes if i.income_type == 'accrued')
    nodes = (
        FlowNode('cash-income', 'Cash Income', cash),
        FlowNode('accrued-income', 'Accrued Income', accrued),
        FlowNode('total-income', 'Total Income', _total(incomes)),
    )
    edges = []
    if cash > 0:
        edges.append(FlowEdge('cash-income', 'total-income', cash))
    if accrued > 0:
        edges.append(FlowEdge('accrued-income', 'total-income', accrued))
    return FlowGraph(nodes, tuple(edges))


def goal_detail_flow(
    expenses: Sequence[Expense],
    savings: Sequence[Saving],
    goals: Sequence[Goal],
) -> FlowGraph:
    """Savings allocated to the first few active goals.

    A goal is weighted by its linked expense's amount, or one goal unit
    when it has none.
    """
    by_id = {expense.id: expense for expense in expenses}
    nodes = [FlowNode('savings', 'Savings', savings_balance(savings))]
    edges = []
    for goal in active_goals(goals)[:GOAL_DETAIL_LIMIT]:
        linked = by_id.get(goal.linked_expense_id) if goal.linked_expense_id else None
        value = linked.amount if linked and linked.amount else float(GOAL_FLOW_UNIT)
        node_id = f"goal-{goal.id}"
        nodes.append(FlowNode(node_id, goal.title[:GOAL_TITLE_MAX_LENGTH], value))
        edges.append(FlowEdge('savings', node_id, value))
    return FlowGraph(tuple(nodes), tuple(edges))


def expense_detail_flow(
    expenses: Sequence[Expense],
    fixed_expenses: Sequence[FixedExpense],
    all_expenses: Optional[Sequence[Expense]] = None,
) -> FlowGraph:
    """Split total expenses into fixed and one-time spending.

    The one-time figure is recomputed from ``all_expenses`` when given,
    so under an active time filter it can exceed the filtered total.
    """
    total_expenses = _total(expenses)
    fixed = fixed_total(fixed_expenses)
    onetime = _total(all_expenses if all_expenses is not None else expenses)
    nodes = (
        FlowNode('expenses', 'Total Expenses', total_expenses),
        FlowNode('fixed', 'Fixed Expenses', fixed),
        FlowNode('onetime', 'One-Time Expenses', onetime),
    )
    edges = []
    if fixed > 0:
        edges.append(FlowEdge('expenses', 'fixed', fixed))
    if onetime > 0:
        edges.append(FlowEdge('expenses', 'onetime', onetime))
    return FlowGraph(nodes, tuple(edges))


def _category_flow(
    root: FlowNode,
    prefix: str,
    labels: Dict[str, str],
    totals: Dict[str, float],
) -> FlowGraph:
    nodes = [root]
    edges = []
    for category, label in labels.items():
        total = totals.get(category, 0.0)
        if total > 0:
            node_id = f"{prefix}-{category}"
            nodes.append(FlowNode(node_id, label, total))
            edges.append(FlowEdge(root.id, node_id, total))
    return FlowGraph(tuple(nodes), tuple(edges))


def _category_totals(records: Iterable, fallback: str, known: Dict[str, str]) -> Dict[str, float]:
    totals: Dict[str, float] = {}
    for record in records:
        category = record.category if record.category in known else fallback
        totals[category] = totals.get(category, 0.0) + record.amount
    return totals


def fixed_category_flow(fixed_expenses: Sequence[FixedExpense]) -> FlowGraph:
    active = active_fixed_expenses(fixed_expenses)
    totals = _category_totals(active, DEFAULT_FIXED_EXPENSE_CATEGORY, FIXED_EXPENSE_CATEGORIES)
    root = FlowNode('fixed-expenses', 'Fixed Expenses', _total(active))
    return _category_flow(root, 'fixed-cat', FIXED_EXPENSE_CATEGORIES, totals)


def onetime_category_flow(expenses: Sequence[Expense]) -> FlowGraph:
    totals = _category_totals(expenses, DEFAULT_EXPENSE_CATEGORY, EXPENSE_CATEGORIES)
    root = FlowNode('onetime-expenses', 'One-Time Expenses', _total(expenses))
    return _category_flow(root, 'onetime-cat', EXPENSE_CATEGORIES, totals)


def build_flow(
    level: str,
    expenses: Sequence[Expense],
    incomes: Sequence[Income],
    savings: Sequence[Saving],
    goals: Sequence[Goal],
    fixed_expenses: Sequence[FixedExpense],
    all_expenses: Optional[Sequence[Expense]] = None,
) -> FlowGraph:
    """Build the graph for one drill-down level."""
    if level == OVERVIEW:
        return overview_flow(expenses, incomes, savings, goals)
    if level == INCOME_DETAIL:
        return income_detail_flow(incomes)
    if level == GOAL_DETAIL:
        return goal_detail_flow(expenses, savings, goals)
    if level == EXPENSE_DETAIL:
        return expense_detail_flow(expenses, fixed_expenses, all_expenses)
    if level == FIXED_CATEGORIES:
        return fixed_category_flow(fixed_expenses)
    if level == ONETIME_CATEGORIES:
        return onetime_category_flow(expenses)
    raise ValueError(f"Unknown flow level '{level}'. Expected one of {LEVELS}.")
