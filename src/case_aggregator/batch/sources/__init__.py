"""
Remote report sources.
"""

from .report_fetcher import ReportFetcher

__all__ = [
    "ReportFetcher",
]
