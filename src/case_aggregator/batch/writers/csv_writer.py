"""
CSV writer: one row per record once its country's day counter has started.
"""

import csv
import io
from typing import Sequence

from case_aggregator.core.models import Record

from .base_writer import BaseWriter, day_number

CSV_HEADER = [
    "Date",
    "Day",
    "Country",
    "Confirmed",
    "Deaths",
    "Recovered",
    "NewConfirmed",
    "NewDeaths",
    "NewRecovered",
    "Active",
]


class CsvReportWriter(BaseWriter):
    """
    Writes the flat CSV report.
    """

    @property
    def format_name(self) -> str:
        return "csv"

    def render(self, records: Sequence[Record]) -> str:
        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for record in self.select(records):
            writer.writerow([
                record.date.isoformat(),
                day_number(record, self.day_metric),
                record.country,
                record.confirmed,
                record.deaths,
                record.recovered,
                record.calculated.get("ConfirmedDelta", 0),
                record.calculated.get("DeathsDelta", 0),
                record.calculated.get("RecoveredDelta", 0),
                record.active,
            ])

        return buffer.getvalue()
