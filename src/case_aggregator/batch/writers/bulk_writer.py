"""
Bulk-index writer: newline-delimited action/document pairs.
"""

import json
from typing import Sequence

from case_aggregator.core.models import Record

from .base_writer import BaseWriter


class BulkIndexWriter(BaseWriter):
    """
    Emits an index action header followed by the record document,
    ready for a search engine's bulk API. `_id` is the record's
    position among emitted records.
    """

    @property
    def format_name(self) -> str:
        return "bulk"

    def render(self, records: Sequence[Record]) -> str:
        lines = []
        for i, record in enumerate(self.select(records)):
            lines.append(json.dumps({"index": {"_id": i}}))
            lines.append(json.dumps(record.to_document()))
        return "".join(f"{line}\n" for line in lines)
