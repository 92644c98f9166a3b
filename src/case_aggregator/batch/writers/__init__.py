"""
Output writers for derived records.
"""

from case_aggregator.core.errors import UnsupportedFormatError

from .base_writer import BaseWriter, day_number
from .bulk_writer import BulkIndexWriter
from .csv_writer import CSV_HEADER, CsvReportWriter
from .json_writer import JsonArrayWriter

WRITERS: dict[str, type[BaseWriter]] = {
    "bulk": BulkIndexWriter,
    "csv": CsvReportWriter,
    "json": JsonArrayWriter,
}


def get_writer(format_name: str) -> BaseWriter:
    """
    Look up the writer for an output format selector.

    Raises:
        UnsupportedFormatError: If no writer is registered for the format
    """
    writer_cls = WRITERS.get(format_name.lower())
    if writer_cls is None:
        raise UnsupportedFormatError(format_name, WRITERS)
    return writer_cls()


__all__ = [
    "BaseWriter",
    "BulkIndexWriter",
    "CSV_HEADER",
    "CsvReportWriter",
    "JsonArrayWriter",
    "WRITERS",
    "day_number",
    "get_writer",
]
