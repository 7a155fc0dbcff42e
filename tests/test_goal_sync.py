from datetime import date, datetime

import pytest

from finance_tracker.currency import to_base
from finance_tracker.goal_sync import (
    SavingUpsert,
    TargetUpsert,
    apply_saving_edit,
    apply_saving_upsert,
    apply_target_edit,
    apply_target_upsert,
    latest_goal_saving,
)
from finance_tracker.models import FinancialTarget, Saving
from finance_tracker.targets import relevant_targets, target_value, upsert_target

NOW = datetime(2026, 10, 18, 9, 30)


def _target(target_id='t1', currency='NTD', amount=5000.0, period='monthly', target_type='savings'):
    return FinancialTarget(target_id, target_type, amount, currency, period, NOW, NOW)


def test_latest_goal_saving_prefers_later_entry_on_ties():
    savings = [
        Saving('g1', date(2026, 1, 1), 100.0, saving_type='goal'),
        Saving('g2', date(2026, 2, 1), 200.0, saving_type='goal'),
        Saving('g3', date(2026, 2, 1), 300.0, saving_type='goal'),
        Saving('b1', date(2026, 3, 1), 400.0),
    ]
    assert latest_goal_saving(savings).id == 'g3'
    assert latest_goal_saving([Saving('b1', date(2026, 3, 1), 400.0)]) is None


def test_target_edit_updates_latest_goal_saving():
    savings = [
        Saving('g1', date(2026, 1, 1), 100.0, saving_type='goal'),
        Saving('g2', date(2026, 2, 1), 200.0, saving_type='goal'),
    ]
    upsert = apply_target_edit(100, 'USD', savings)

    assert upsert.saving_id == 'g2'
    assert upsert.date == date(2026, 2, 1)
    assert upsert.amount == pytest.approx(3226)
    assert not upsert.is_create


def test_target_edit_creates_goal_saving_when_none_exists():
    upsert = apply_target_edit(8000, 'NTD', [Saving('b1', date(2026, 3, 1), 400.0)], today=date(2026, 10, 18))
    assert upsert == SavingUpsert(saving_id=None, date=date(2026, 10, 18), amount=8000)

    updated = apply_saving_upsert([], upsert, id_factory=lambda: 'new-saving')
    assert updated == [Saving('new-saving', date(2026, 10, 18), 8000, saving_type='goal')]


def test_non_monthly_target_edit_does_not_sync():
    assert apply_target_edit(8000, 'NTD', [], period='weekly') is None


def test_saving_edit_ignores_balance_savings():
    saving = Saving('b1', date(2026, 3, 1), 400.0)
    assert apply_saving_edit(saving, [_target()], 'NTD') is None


def test_saving_edit_skips_unchanged_goal_amount():
    before = Saving('g1', date(2026, 3, 1), 400.0, saving_type='goal')
    after = Saving('g1', date(2026, 3, 1), 400.0, saving_type='goal', note='renamed')
    assert apply_saving_edit(after, [_target()], 'NTD', previous=before) is None


def test_zero_goal_saving_leaves_target_alone():
    zero = Saving('g1', date(2026, 3, 1), 0.0, saving_type='goal')
    assert apply_saving_edit(zero, [], 'NTD') is None

    before = Saving('g1', date(2026, 3, 1), 400.0, saving_type='goal')
    targets = [_target()]
    assert apply_saving_edit(zero, targets, 'NTD', previous=before) is None
    assert targets == [_target()]


def test_new_goal_saving_creates_exactly_one_target():
    saving = Saving('g1', date(2026, 3, 1), 1.0, saving_type='goal')
    upsert = apply_saving_edit(saving, [], 'NTD')
    targets = apply_target_upsert([], upsert, now=NOW)
    assert [(t.type, t.period, t.currency, t.amount) for t in targets] == [('savings', 'monthly', 'NTD', 1.0)]


def test_saving_edit_syncs_when_type_becomes_goal():
    before = Saving('s1', date(2026, 3, 1), 400.0)
    after = Saving('s1', date(2026, 3, 1), 400.0, saving_type='goal')
    upsert = apply_saving_edit(after, [_target()], 'NTD', previous=before)
    assert upsert.target_id == 't1'
    assert upsert.amount == 400


def test_saving_edit_targets_active_currency():
    saving = Saving('g1', date(2026, 3, 1), to_base(250, 'USD'), saving_type='goal')
    targets = [_target('t-ntd'), _target('t-usd', currency='USD')]

    upsert = apply_saving_edit(saving, targets, 'USD')
    assert upsert.target_id == 't-usd'
    assert upsert.display_amount == pytest.approx(250)

    created = apply_saving_edit(saving, targets, 'CAD')
    assert created.target_id is None
    assert created.currency == 'CAD'


def test_apply_target_upsert_creates_then_updates():
    upsert = TargetUpsert(target_id=None, currency='NTD', amount=6000.0, display_amount=6000.0)
    targets = apply_target_upsert([], upsert, now=NOW)
    assert len(targets) == 1
    assert targets[0].type == 'savings'
    assert targets[0].period == 'monthly'

    later = datetime(2026, 11, 1)
    again = apply_target_upsert(targets, TargetUpsert(targets[0].id, 'NTD', 7000.0, 7000.0), now=later)
    assert len(again) == 1
    assert again[0].id == targets[0].id
    assert again[0].amount == 7000
    assert again[0].created_at == NOW
    assert again[0].updated_at == later


def test_saving_upsert_updates_only_matching_record():
    savings = [
        Saving('g1', date(2026, 1, 1), 100.0, saving_type='goal'),
        Saving('g2', date(2026, 2, 1), 200.0, saving_type='goal'),
    ]
    updated = apply_saving_upsert(savings, SavingUpsert('g2', date(2026, 2, 1), 900.0))
    assert [s.amount for s in updated] == [100.0, 900.0]


def test_upsert_target_validates_input():
    with pytest.raises(ValueError):
        upsert_target([], 'savings', 0, 'monthly', 'NTD')
    with pytest.raises(ValueError):
        upsert_target([], 'rent', 100, 'monthly', 'NTD')
    with pytest.raises(ValueError):
        upsert_target([], 'savings', 100, 'daily', 'NTD')


def test_upsert_target_keys_on_type_period_and_currency():
    targets = upsert_target([], 'income', 100, 'monthly', 'NTD', now=NOW, id_factory=lambda: 'a')
    targets = upsert_target(targets, 'income', 200, 'weekly', 'NTD', now=NOW, id_factory=lambda: 'b')
    targets = upsert_target(targets, 'income', 300, 'monthly', 'NTD', now=NOW, id_factory=lambda: 'c')

    assert [(t.id, t.amount) for t in targets] == [('a', 300), ('b', 200)]
    assert target_value(targets, 'income', 'weekly', 'NTD') == 200
    assert target_value(targets, 'expense', 'weekly', 'NTD') is None


def test_relevant_targets_filters_period_and_currency():
    targets = [
        _target('t1'),
        _target('t2', currency='USD'),
        _target('t3', period='yearly'),
    ]
    assert [t.id for t in relevant_targets(targets, 'monthly', 'NTD')] == ['t1']
