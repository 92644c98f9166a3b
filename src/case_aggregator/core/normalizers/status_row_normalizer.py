"""
StatusRowNormalizer - status-shaped rows (one status per row) to Records.

Each status row becomes a partial Record carrying only its own status
count. Because the counter store sums per key, ingesting the partial
Records, or the merged Record from merge_status_records, yields the
same totals as one three-column report row.
"""

from typing import Any, Iterable, Mapping

from case_aggregator.core.models import AggregationKey, Record, StatusRow
from case_aggregator.observability.metrics import increment_counter, rows_normalized_total

from .base_normalizer import BaseNormalizer


class StatusRowNormalizer(BaseNormalizer):
    """
    Normalizes StatusRows (or raw dictionaries in that shape).
    """

    def __init__(self, country_aliases: Mapping[str, str] | None = None):
        super().__init__(country_aliases)

    @property
    def input_shape(self) -> str:
        return "status"

    def normalize(self, raw: StatusRow | Mapping[str, Any]) -> Record:
        """
        Normalize one status row.

        Args:
            raw: StatusRow or a mapping accepted by StatusRow

        Returns:
            Dated Record with only the row's status populated

        Raises:
            pydantic.ValidationError: If the row has no country, date or a known status
        """
        row = raw if isinstance(raw, StatusRow) else StatusRow.model_validate(raw)
        cases = self.count(row.status, row.cases)

        increment_counter(rows_normalized_total, input_shape=self.input_shape)

        return Record(
            date=row.date,
            country=self.canonical_country(row.country.strip()),
            region=row.region.strip(),
            **{row.status: cases},
        )


def merge_status_records(records: Iterable[Record]) -> list[Record]:
    """
    Fold partial Records sharing an aggregation key into one Record per key.

    Output keeps the order in which each key was first seen.
    """
    merged: dict[AggregationKey, Record] = {}

    for record in records:
        existing = merged.get(record.key)
        if existing is None:
            merged[record.key] = record.model_copy(deep=True)
            continue
        existing.confirmed += record.confirmed
        existing.deaths += record.deaths
        existing.recovered += record.recovered
        existing.active += record.active

    return list(merged.values())
