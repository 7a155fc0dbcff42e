"""Keep the goal-type saving and the monthly savings target in step.

The monthly savings target in the active display currency should equal
the most recently dated ``goal`` saving.  Either side can be edited, so
the rule is split into two one-directional commands:

* :func:`apply_target_edit` runs when the user edits the savings target
  and describes the saving write that follows from it.
* :func:`apply_saving_edit` runs when the user creates or edits a saving
  and describes the target write that follows from it.

Neither command calls the other and neither touches storage.  The caller
applies the returned description (see :func:`apply_saving_upsert` and
:func:`apply_target_upsert`) without triggering the opposite command,
which is what keeps the two sides from updating each other forever.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime
from typing import Callable, Iterable, List, Optional

from .currency import from_base, to_base
from .models import FinancialTarget, Saving
from .targets import find_target, upsert_target

logger = logging.getLogger(__name__)

SYNCED_TARGET_TYPE = 'savings'
SYNCED_PERIOD = 'monthly'


@dataclass(frozen=True)
class SavingUpsert:
    """Write a goal saving: update ``saving_id`` or create one if it is None."""

    saving_id: Optional[str]
    date: date
    amount: float  # base currency

    @property
    def is_create(self) -> bool:
        return self.saving_id is None


@dataclass(frozen=True)
class TargetUpsert:
    """Write the monthly savings target for ``currency``.

    ``target_id`` is the existing target for that currency, or None when a
    new one has to be created.
    """

    target_id: Optional[str]
    currency: str
    amount: float  # base currency
    display_amount: float  # amount expressed in ``currency``
    target_type: str = SYNCED_TARGET_TYPE
    period: str = SYNCED_PERIOD


def latest_goal_saving(savings: Iterable[Saving]) -> Optional[Saving]:
    """Most recently dated goal saving; on equal dates the later list entry wins."""
    latest: Optional[Saving] = None
    for saving in savings:
        if saving.saving_type != 'goal':
            continue
        if latest is None or saving.date >= latest.date:
            latest = saving
    return latest


def apply_target_edit(
    amount: float,
    currency: str,
    savings: Iterable[Saving],
    period: str = SYNCED_PERIOD,
    today: Optional[date] = None,
) -> Optional[SavingUpsert]:
    """Describe the goal-saving write caused by editing a savings target.

    Args:
        amount: New target amount, expressed in ``currency``
        currency: Currency the target is edited in
        savings: Current saving records
        period: Period of the edited target; only monthly targets sync
        today: Date used when a new goal saving has to be created

    Returns:
        The saving write to apply, or None if the target does not sync
    """
    if period != SYNCED_PERIOD:
        return None
    amount_base = to_base(amount, currency)
    latest = latest_goal_saving(savings)
    if latest is not None:
        logger.debug("Savings target edit updates goal saving %s to %.2f", latest.id, amount_base)
        return SavingUpsert(saving_id=latest.id, date=latest.date, amount=amount_base)
    logger.debug("Savings target edit creates a goal saving of %.2f", amount_base)
    return SavingUpsert(saving_id=None, date=today or date.today(), amount=amount_base)


def apply_saving_edit(
    saving: Saving,
    targets: Iterable[FinancialTarget],
    currency: str,
    previous: Optional[Saving] = None,
) -> Optional[TargetUpsert]:
    """Describe the savings-target write caused by creating or editing a saving.

    Args:
        saving: The saving as it is after the user's change
        targets: Current financial targets
        currency: Active display currency
        previous: The saving before the change, or None for a new record

    Returns:
        The target write to apply, or None if nothing needs to change.
        Non-goal savings and goal savings that are not positive never sync;
        an edited goal saving only syncs when it just became goal-type or
        its amount changed.
    """
    if saving.saving_type != 'goal':
        return None
    # targets are always > 0
    if saving.amount <= 0:
        return None
    if previous is not None and previous.saving_type == 'goal' and previous.amount == saving.amount:
        return None

    existing = find_target(targets, SYNCED_TARGET_TYPE, SYNCED_PERIOD, currency)
    logger.debug(
        "Goal saving %s syncs the monthly savings target in %s (%s)",
        saving.id,
        currency,
        'update' if existing else 'create',
    )
    return TargetUpsert(
        target_id=existing.id if existing else None,
        currency=currency,
        amount=saving.amount,
        display_amount=from_base(saving.amount, currency),
    )


def apply_saving_upsert(
    savings: Iterable[Saving],
    upsert: SavingUpsert,
    id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
) -> List[Saving]:
    """Return the saving list with ``upsert`` applied."""
    savings = list(savings)
    if upsert.is_create:
        return savings + [Saving(id=id_factory(), date=upsert.date, amount=upsert.amount, saving_type='goal')]
    return [
        replace(saving, amount=upsert.amount) if saving.id == upsert.saving_id else saving
        for saving in savings
    ]


def apply_target_upsert(
    targets: Iterable[FinancialTarget],
    upsert: TargetUpsert,
    now: Optional[datetime] = None,
) -> List[FinancialTarget]:
    """Return the target list with ``upsert`` applied."""
    return upsert_target(targets, upsert.target_type, upsert.amount, upsert.period, upsert.currency, now=now)
