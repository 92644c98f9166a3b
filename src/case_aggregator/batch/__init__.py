"""
Batch aggregation module.
"""

from .pipeline import AggregationPipeline, each_day
from .readers import ReportReader, StatusReader
from .sources import ReportFetcher
from .writers import BulkIndexWriter, CsvReportWriter, JsonArrayWriter, get_writer

__all__ = [
    "AggregationPipeline",
    "BulkIndexWriter",
    "CsvReportWriter",
    "JsonArrayWriter",
    "ReportFetcher",
    "ReportReader",
    "StatusReader",
    "each_day",
    "get_writer",
]
