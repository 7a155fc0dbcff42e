"""Financial target lookup and find-or-create updates.

At most one target exists per ``(type, period, currency)`` triple; every
update resolves against that composite key.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, List, Optional

from .models import TARGET_PERIODS, TARGET_TYPES, FinancialTarget


def _new_id() -> str:
    return str(uuid.uuid4())


def find_target(
    targets: Iterable[FinancialTarget],
    target_type: str,
    period: str,
    currency: str,
) -> Optional[FinancialTarget]:
    for target in targets:
        if target.type == target_type and target.period == period and target.currency == currency:
            return target
    return None


def relevant_targets(targets: Iterable[FinancialTarget], period: str, currency: str) -> List[FinancialTarget]:
    """Targets shown for a period in the active display currency."""
    return [t for t in targets if t.period == period and t.currency == currency]


def target_value(
    targets: Iterable[FinancialTarget],
    target_type: str,
    period: str,
    currency: str,
) -> Optional[float]:
    target = find_target(targets, target_type, period, currency)
    return target.amount if target else None


def upsert_target(
    targets: Iterable[FinancialTarget],
    target_type: str,
    amount: float,
    period: str,
    currency: str,
    now: Optional[datetime] = None,
    id_factory: Callable[[], str] = _new_id,
) -> List[FinancialTarget]:
    """Set the amount of the target for ``(target_type, period, currency)``.

    An existing target keeps its id and ``created_at``; otherwise a new one
    is appended.  Returns the new target list.

    Raises:
        ValueError: If the type or period is unknown or the amount is not positive
    """
    if target_type not in TARGET_TYPES:
        raise ValueError(f"Unknown target type '{target_type}'")
    if period not in TARGET_PERIODS:
        raise ValueError(f"Unknown target period '{period}'")
    if amount <= 0:
        raise ValueError("Target amount must be positive")

    now = now or datetime.now()
    targets = list(targets)
    existing = find_target(targets, target_type, period, currency)
    if existing is not None:
        updated = replace(existing, amount=amount, updated_at=now)
        return [updated if t.id == existing.id else t for t in targets]

    created = FinancialTarget(
        id=id_factory(),
        type=target_type,
        amount=amount,
        currency=currency,
        period=period,
        created_at=now,
        updated_at=now,
    )
    return targets + [created]
