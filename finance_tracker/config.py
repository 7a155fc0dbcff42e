"""Configuration management for the finance tracker.

This module centralizes all configuration values including the storage
location, the default display currency and the tunable constants used by
the analytics engine.  Paths and the currency can be overridden through
environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in finance_tracker/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Per-key record storage
DATA_DIR = Path(os.getenv("FINTRACK_DATA_DIR", _PROJECT_ROOT / "data")).resolve()

# Display currency used when the caller does not pick one
DEFAULT_CURRENCY = os.getenv("FINTRACK_CURRENCY", "NTD").upper()

# Trend projection
PROJECTION_HORIZON_DAYS = 30

# Flow decomposition heuristics
SAVINGS_FLOW_SHARE = 0.3
GOALS_FLOW_SHARE = 0.4
GOAL_FLOW_UNIT = 1000
GOAL_DETAIL_LIMIT = 5
GOAL_TITLE_MAX_LENGTH = 20


def ensure_data_directories() -> None:
    """Create the storage directory if it doesn't exist."""
    DATA_DIR.mkdir(parents=True, exist_ok=True)


def get_data_dir() -> str:
    """Get the storage directory as a string."""
    return str(DATA_DIR)
