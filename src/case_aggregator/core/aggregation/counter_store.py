"""
Counter store: run-scoped running totals and threshold crossing dates.

Created empty at the start of a run, filled by ingestion, then frozen
and only read by the derive pass. Nothing is persisted between runs.
"""

import datetime as dt
from typing import Iterable

from case_aggregator.core.models import AggregationKey, Record

COUNTED_METRICS = ("confirmed", "deaths", "recovered", "active")
DEFAULT_THRESHOLDS: tuple[tuple[str, int], ...] = (
    ("confirmed", 10),
    ("confirmed", 100),
    ("deaths", 10),
    ("deaths", 100),
)


class CounterStore:
    """
    Accumulates per-key running totals across every ingested record.

    Totals are kept per aggregation key (country, region, day) and per
    country-day; threshold crossings are checked against the country-day
    total so countries split across many regions are not under-counted.
    A crossing date, once recorded, never changes.
    """

    def __init__(self, thresholds: Iterable[tuple[str, int]] = DEFAULT_THRESHOLDS):
        """
        Initialize an empty store.

        Args:
            thresholds: (metric, limit) pairs whose first crossing is tracked
        """
        self.thresholds = tuple(thresholds)
        for metric, _ in self.thresholds:
            if metric not in COUNTED_METRICS:
                raise ValueError(f"Unknown threshold metric: {metric}")

        self._totals: dict[tuple[AggregationKey, str], int] = {}
        self._country_totals: dict[tuple[str, dt.date, str], int] = {}
        self._crossings: dict[tuple[str, str, int], dt.date] = {}
        self._frozen = False

    def accumulate(self, record: Record) -> None:
        """
        Add a dated record's counts to its key and record new crossings.

        Raises:
            RuntimeError: If the store has been frozen for the derive pass
            ValueError: If the record has no date
        """
        if self._frozen:
            raise RuntimeError("CounterStore is frozen; ingestion has finished")

        key = record.key
        for metric in COUNTED_METRICS:
            value = getattr(record, metric)
            self._totals[(key, metric)] = self._totals.get((key, metric), 0) + value
            country_key = (key.country, key.date, metric)
            self._country_totals[country_key] = self._country_totals.get(country_key, 0) + value

        for metric, limit in self.thresholds:
            crossing_key = (key.country, metric, limit)
            if crossing_key in self._crossings:
                continue
            if self._country_totals[(key.country, key.date, metric)] > limit:
                self._crossings[crossing_key] = key.date

    def freeze(self) -> None:
        """Reject further ingestion."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def total(self, key: AggregationKey, metric: str) -> int | None:
        """Running total for a key, or None if no record was ingested for it."""
        return self._totals.get((key, metric))

    def country_total(self, country: str, day: dt.date, metric: str) -> int | None:
        """Running total for a country on a day, summed across regions."""
        return self._country_totals.get((country, day, metric))

    def crossing_date(self, country: str, metric: str, limit: int) -> dt.date | None:
        """First day the country's total for `metric` exceeded `limit`."""
        return self._crossings.get((country, metric, limit))

    def crossings(self) -> dict[tuple[str, str, int], dt.date]:
        return dict(self._crossings)

    def __len__(self) -> int:
        return len(self._totals) // len(COUNTED_METRICS)

    def __repr__(self) -> str:
        return (
            f"CounterStore(keys={len(self)}, crossings={len(self._crossings)}, "
            f"frozen={self._frozen})"
        )
