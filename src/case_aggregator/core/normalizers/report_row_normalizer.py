"""
ReportRowNormalizer - one daily-report line to one Record.
"""

from typing import Mapping

from case_aggregator.core.models import ColumnMapping, Record
from case_aggregator.observability.metrics import increment_counter, rows_normalized_total

from .base_normalizer import BaseNormalizer


def split_row(row: str) -> list[str]:
    """
    Strip quotes and surrounding whitespace, then split on commas.

    Quoted fields containing commas are not supported.
    """
    return [field.strip() for field in row.replace('"', "").strip().split(",")]


class ReportRowNormalizer(BaseNormalizer):
    """
    Normalizes rows of a report file using that file's column mapping.

    The returned Record has no date: rows in older layouts carry no
    usable date column, so the caller stamps the day being processed.
    """

    def __init__(self, mapping: ColumnMapping, country_aliases: Mapping[str, str] | None = None):
        super().__init__(country_aliases)
        self.mapping = mapping

    @property
    def input_shape(self) -> str:
        return "report"

    def normalize(self, raw: str) -> Record:
        """
        Normalize one raw data line.

        Args:
            raw: Data line from a report file

        Returns:
            Record with `date` unset and `calculated` empty
        """
        fields = split_row(raw)

        def field(role: str) -> str:
            index = getattr(self.mapping, role)
            return fields[index] if index < len(fields) else ""

        confirmed = self.count("confirmed", field("confirmed"))
        deaths = self.count("deaths", field("deaths"))
        recovered = self.count("recovered", field("recovered"))

        increment_counter(rows_normalized_total, input_shape=self.input_shape)

        return Record(
            country=self.canonical_country(field("country")),
            region=field("region"),
            confirmed=confirmed,
            deaths=deaths,
            recovered=recovered,
            active=confirmed - deaths - recovered,
        )
