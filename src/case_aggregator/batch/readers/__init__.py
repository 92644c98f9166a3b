"""
Batch input readers.
"""

from .report_reader import ReportReader
from .status_reader import StatusReader

__all__ = [
    "ReportReader",
    "StatusReader",
]
