"""Top-level package for the Finance Tracker analytics engine.

The package derives read-only views from a snapshot of personal finance
records.  The primary modules are:

* ``models`` - record types (expenses, incomes, savings, goals, targets)
* ``currency`` - fixed-rate conversion between NTD, USD and CAD
* ``aggregation`` - per-day and per-month totals and the monthly summary
* ``time_periods`` - the year/quarter/month/week filter hierarchy
* ``projection`` - cumulative cash-flow trends and 30-day projections
* ``goal_sync`` - keeping the goal saving and savings target in step
* ``flow`` - the drill-down flow decomposition behind the Sankey chart
* ``analytics`` - :class:`FinanceAnalytics`, which ties the above together
* ``storage`` - per-key JSON record storage
* ``visualization`` - functions that generate Plotly figures
"""

from . import analytics  # noqa: F401  # re-exported for convenience
from . import storage  # noqa: F401  # re-exported for convenience
from . import visualization  # noqa: F401  # re-exported for convenience
from .analytics import FinanceAnalytics
from .models import Snapshot

__all__ = ["analytics", "storage", "visualization", "FinanceAnalytics", "Snapshot"]
