"""Per-key JSON storage for tracker records.

Each record collection lives in its own file (``expenses.json``,
``incomes.json`` ...) under the data directory, stored in the client's
camelCase shape.  Records written by older versions may lack optional
fields; :func:`upgrade_record` is the one place that brings any stored
shape up to the current one, and it runs once per record at load time.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from .config import DATA_DIR, ensure_data_directories
from .models import (
    DEFAULT_EXPENSE_CATEGORY,
    DEFAULT_FIXED_EXPENSE_CATEGORY,
    Expense,
    FinancialTarget,
    FixedExpense,
    Goal,
    GoalItem,
    Income,
    Saving,
    Snapshot,
)

logger = logging.getLogger(__name__)

RECORD_KEYS = ('expenses', 'incomes', 'savings', 'fixed_expenses', 'goals', 'targets')
PRIORITY_KEY = 'priority_goal'

# Fields back-filled when a stored record predates them
RECORD_DEFAULTS: Dict[str, Dict[str, Any]] = {
    'expenses': {
        'description': '',
        'category': DEFAULT_EXPENSE_CATEGORY,
        'needsCheck': False,
        'goalId': None,
        'taskId': None,
    },
    'incomes': {'source': '', 'incomeType': 'cash', 'note': ''},
    'savings': {'savingType': 'balance', 'note': ''},
    'fixed_expenses': {
        'frequency': 'monthly',
        'isActive': True,
        'category': DEFAULT_FIXED_EXPENSE_CATEGORY,
    },
    'goals': {
        'deadline': None,
        'completed': False,
        'category': None,
        'linkedExpenseId': None,
        'preTasks': [],
        'postTasks': [],
        'postDreams': [],
        'createdAt': None,
    },
    'targets': {'currency': 'NTD', 'period': 'monthly'},
}

# Fields older versions stored that the current shape no longer carries
LEGACY_FIELDS = {'reviewCount', 'isMagicWand'}


def _check_key(key: str) -> None:
    if key not in RECORD_KEYS:
        raise ValueError(f"Unknown record key '{key}'. Expected one of {RECORD_KEYS}.")


def upgrade_record(key: str, raw: Dict[str, Any]) -> Dict[str, Any]:
    """Bring a stored record of any version up to the current shape.

    Missing optional fields get their defaults, empty strings in optional
    fields become ``None`` and retired fields are dropped.

    Example:
        >>> upgrade_record('savings', {'id': 's1', 'date': '2026-01-31', 'amount': 100})
        {'savingType': 'balance', 'note': '', 'id': 's1', 'date': '2026-01-31', 'amount': 100}
    """
    _check_key(key)
    upgraded = dict(RECORD_DEFAULTS[key])
    upgraded.update({k: v for k, v in raw.items() if k not in LEGACY_FIELDS})
    for field_name, default in RECORD_DEFAULTS[key].items():
        if default is None and upgraded.get(field_name) == '':
            upgraded[field_name] = None
        elif upgraded.get(field_name) is None and default is not None:
            upgraded[field_name] = default
    return upgraded


def legacy_priority_goal_id(raw_goals: Iterable[Dict[str, Any]]) -> Optional[str]:
    """Recover the top-priority goal from per-goal ``isMagicWand`` flags."""
    for raw in raw_goals:
        if raw.get('isMagicWand'):
            return raw.get('id')
    return None


def _parse_date(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    return date.fromisoformat(value[:10])


def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromisoformat(value.replace('Z', '+00:00'))


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _goal_item(data: Dict[str, Any]) -> GoalItem:
    return GoalItem(
        id=data['id'],
        title=data.get('title', ''),
        completed=bool(data.get('completed', False)),
        linked_expense_id=data.get('linkedExpenseId') or None,
    )


def _goal_item_dict(item: GoalItem) -> Dict[str, Any]:
    return {
        'id': item.id,
        'title': item.title,
        'completed': item.completed,
        'linkedExpenseId': item.linked_expense_id,
    }


def record_from_dict(key: str, data: Dict[str, Any]):
    """Build the record for ``key`` from an upgraded stored dict."""
    if key == 'expenses':
        return Expense(
            id=data['id'],
            date=date.fromisoformat(data['date'][:10]),
            description=data['description'],
            amount=float(data['amount']),
            category=data['category'],
            needs_check=bool(data['needsCheck']),
            goal_id=data['goalId'],
            task_id=data['taskId'],
        )
    if key == 'incomes':
        return Income(
            id=data['id'],
            date=date.fromisoformat(data['date'][:10]),
            source=data['source'],
            amount=float(data['amount']),
            income_type=data['incomeType'],
            note=data['note'],
        )
    if key == 'savings':
        return Saving(
            id=data['id'],
            date=date.fromisoformat(data['date'][:10]),
            amount=float(data['amount']),
            saving_type=data['savingType'],
            note=data['note'],
        )
    if key == 'fixed_expenses':
        return FixedExpense(
            id=data['id'],
            description=data['description'],
            amount=float(data['amount']),
            frequency=data['frequency'],
            is_active=bool(data['isActive']),
            category=data['category'],
        )
    if key == 'goals':
        return Goal(
            id=data['id'],
            title=data.get('title', ''),
            deadline=_parse_date(data['deadline']),
            completed=bool(data['completed']),
            category=data['category'],
            linked_expense_id=data['linkedExpenseId'],
            pre_tasks=tuple(_goal_item(item) for item in data['preTasks']),
            post_tasks=tuple(_goal_item(item) for item in data['postTasks']),
            post_dreams=tuple(_goal_item(item) for item in data['postDreams']),
            created_at=_parse_datetime(data['createdAt']),
        )
    _check_key(key)
    return FinancialTarget(
        id=data['id'],
        type=data['type'],
        amount=float(data['amount']),
        currency=data['currency'],
        period=data['period'],
        created_at=_parse_datetime(data['createdAt']),
        updated_at=_parse_datetime(data['updatedAt']),
    )


def record_to_dict(key: str, record) -> Dict[str, Any]:
    """Serialise a record into its stored camelCase shape."""
    _check_key(key)
    if key == 'expenses':
        return {
            'id': record.id,
            'date': _iso(record.date),
            'description': record.description,
            'amount': record.amount,
            'category': record.category,
            'needsCheck': record.needs_check,
            'goalId': record.goal_id,
            'taskId': record.task_id,
        }
    if key == 'incomes':
        return {
            'id': record.id,
            'date': _iso(record.date),
            'source': record.source,
            'amount': record.amount,
            'incomeType': record.income_type,
            'note': record.note,
        }
    if key == 'savings':
        return {
            'id': record.id,
            'date': _iso(record.date),
            'amount': record.amount,
            'savingType': record.saving_type,
            'note': record.note,
        }
    if key == 'fixed_expenses':
        return {
            'id': record.id,
            'description': record.description,
            'amount': record.amount,
            'frequency': record.frequency,
            'isActive': record.is_active,
            'category': record.category,
        }
    if key == 'goals':
        return {
            'id': record.id,
            'title': record.title,
            'deadline': _iso(record.deadline),
            'completed': record.completed,
            'category': record.category,
            'linkedExpenseId': record.linked_expense_id,
            'preTasks': [_goal_item_dict(item) for item in record.pre_tasks],
            'postTasks': [_goal_item_dict(item) for item in record.post_tasks],
            'postDreams': [_goal_item_dict(item) for item in record.post_dreams],
            'createdAt': _iso(record.created_at),
        }
    return {
        'id': record.id,
        'type': record.type,
        'amount': record.amount,
        'currency': record.currency,
        'period': record.period,
        'createdAt': _iso(record.created_at),
        'updatedAt': _iso(record.updated_at),
    }


class RecordStore:
    """Handles per-key record file storage."""

    def __init__(self, data_dir: Optional[Path] = None):
        """Initialize record storage.

        Args:
            data_dir: Optional custom directory for record files.
                      Defaults to DATA_DIR from config.
        """
        if data_dir is None:
            ensure_data_directories()
        self.data_dir = Path(data_dir or DATA_DIR)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def get_path(self, key: str) -> Path:
        return self.data_dir / f"{key}.json"

    def _read(self, key: str) -> Any:
        target = self.get_path(key)
        if not target.exists():
            return None
        try:
            with target.open('r', encoding='utf-8') as handle:
                return json.load(handle)
        except (json.JSONDecodeError, OSError) as e:
            logger.warning("Could not read %s: %s", target, e)
            return None

    def _write(self, key: str, payload: Any) -> None:
        target = self.get_path(key)
        try:
            with target.open('w', encoding='utf-8') as handle:
                json.dump(payload, handle, indent=2)
        except OSError as e:
            raise OSError(f"Failed to save {key} to {target}: {e}") from e

    def load_raw(self, key: str) -> List[Dict[str, Any]]:
        """Stored dicts for ``key`` exactly as written, skipping non-dict entries."""
        _check_key(key)
        data = self._read(key)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Ignoring %s: expected a list of records", self.get_path(key))
            return []
        return [item for item in data if isinstance(item, dict)]

    def load(self, key: str) -> List[Any]:
        """Load, upgrade and parse every record stored under ``key``.

        Records that cannot be parsed are skipped with a warning.
        """
        records = []
        for raw in self.load_raw(key):
            try:
                records.append(record_from_dict(key, upgrade_record(key, raw)))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Skipping malformed %s record %r: %s", key, raw.get('id'), e)
        return records

    def save(self, key: str, records: Iterable[Any]) -> None:
        """Write ``records`` under ``key``, replacing what was stored.

        Raises:
            ValueError: If the key is unknown
            OSError: If the file cannot be written
        """
        _check_key(key)
        self._write(key, [record_to_dict(key, record) for record in records])

    def load_priority_goal_id(self) -> Optional[str]:
        data = self._read(PRIORITY_KEY)
        if isinstance(data, dict) and data.get('goalId'):
            return data['goalId']
        return legacy_priority_goal_id(self.load_raw('goals'))

    def save_priority_goal_id(self, goal_id: Optional[str]) -> None:
        self._write(PRIORITY_KEY, {'goalId': goal_id})

    def load_snapshot(self) -> Snapshot:
        loaded = {key: tuple(self.load(key)) for key in RECORD_KEYS}
        return Snapshot(priority_goal_id=self.load_priority_goal_id(), **loaded)

    def save_snapshot(self, snapshot: Snapshot) -> None:
        for key in RECORD_KEYS:
            self.save(key, getattr(snapshot, key))
        self.save_priority_goal_id(snapshot.priority_goal_id)
