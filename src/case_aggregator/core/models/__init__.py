"""
Core data models for the case aggregation pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .column_mapping import REQUIRED_ROLES, ColumnMapping
from .record import AggregationKey, Record
from .status_row import StatusRow

__all__ = [
    "AggregationKey",
    "ColumnMapping",
    "REQUIRED_ROLES",
    "Record",
    "StatusRow",
]
