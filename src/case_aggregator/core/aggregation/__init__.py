"""
Running-total accumulation and derived time-series metrics.
"""

from .counter_store import COUNTED_METRICS, DEFAULT_THRESHOLDS, CounterStore
from .deriver import DELTA_METRICS, AggregateDeriver, days_since_name

__all__ = [
    "AggregateDeriver",
    "COUNTED_METRICS",
    "CounterStore",
    "DEFAULT_THRESHOLDS",
    "DELTA_METRICS",
    "days_since_name",
]
