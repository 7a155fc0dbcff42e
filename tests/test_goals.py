from datetime import date

from finance_tracker.goals import (
    MAX_ACTIVE_GOALS,
    Countdown,
    active_goals,
    can_add_goal,
    expenses_to_cascade,
    goal_countdown,
    linked_expense_ids,
    toggle_priority,
)
from finance_tracker.models import Expense, Goal, GoalItem

TODAY = date(2026, 10, 18)


def test_countdown_urgency_levels():
    assert goal_countdown(date(2026, 10, 15), today=TODAY) == Countdown(3, 'overdue', 'high')
    assert goal_countdown(TODAY, today=TODAY) == Countdown(0, 'today', 'high')
    assert goal_countdown(date(2026, 10, 25), today=TODAY).urgency == 'high'
    assert goal_countdown(date(2026, 11, 10), today=TODAY).urgency == 'medium'
    assert goal_countdown(date(2027, 1, 1), today=TODAY).urgency == 'low'
    assert goal_countdown(None, today=TODAY) is None


def test_active_goal_limit():
    goals = [Goal(f'g{i}', f'Goal {i}') for i in range(MAX_ACTIVE_GOALS)]
    assert not can_add_goal(goals)

    goals[0] = Goal('g0', 'Goal 0', completed=True)
    assert can_add_goal(goals)
    # empty titles are placeholders, not active goals
    assert active_goals([Goal('x', '')]) == []
    assert len(active_goals([Goal('y', ' ')])) == 1


def test_toggle_priority():
    assert toggle_priority(None, 'g1') == 'g1'
    assert toggle_priority('g1', 'g2') == 'g2'
    assert toggle_priority('g2', 'g2') is None


def test_linked_expenses_cascade_with_goal():
    goal = Goal(
        'g1',
        'Trip',
        linked_expense_id='e1',
        pre_tasks=(GoalItem('t1', 'Book flight', linked_expense_id='e2'),),
        post_dreams=(GoalItem('d1', 'Photo album'),),
    )
    expenses = [
        Expense('e1', date(2026, 5, 1), 'Trip', 5000.0),
        Expense('e2', date(2026, 4, 1), 'Flight', 800.0),
        Expense('e3', date(2026, 4, 2), 'Hotel deposit', 300.0, goal_id='g1'),
        Expense('e4', date(2026, 4, 3), 'Coffee', 3.0),
    ]
    assert linked_expense_ids([goal]) == {'e1', 'e2'}
    assert [e.id for e in expenses_to_cascade(goal, expenses)] == ['e1', 'e2', 'e3']
