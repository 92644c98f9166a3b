"""
Row normalizers for both supported input shapes.

Report rows carry confirmed/deaths/recovered together; status rows
carry one status count each.
"""

from .base_normalizer import BaseNormalizer, parse_count
from .report_row_normalizer import ReportRowNormalizer, split_row
from .status_row_normalizer import StatusRowNormalizer, merge_status_records

__all__ = [
    "BaseNormalizer",
    "ReportRowNormalizer",
    "StatusRowNormalizer",
    "merge_status_records",
    "parse_count",
    "split_row",
]
