"""
JSON array writer: every record, including those before any threshold.
"""

import json
from typing import Iterable, Sequence

from case_aggregator.core.models import Record

from .base_writer import BaseWriter


class JsonArrayWriter(BaseWriter):
    """
    Writes all records as a single JSON array.
    """

    @property
    def format_name(self) -> str:
        return "json"

    def select(self, records: Iterable[Record]) -> list[Record]:
        return list(records)

    def render(self, records: Sequence[Record]) -> str:
        return json.dumps([record.to_document() for record in records], indent=2) + "\n"
