"""
Aggregate deriver: the second pass over ingested records.

Runs only after every day has been ingested, so "yesterday" totals and
country crossing dates are final when each record is derived.
"""

import datetime as dt
from typing import Iterable, Iterator

from case_aggregator.core.models import Record

from .counter_store import CounterStore

DELTA_METRICS = (
    ("confirmed", "ConfirmedDelta"),
    ("deaths", "DeathsDelta"),
    ("recovered", "RecoveredDelta"),
)


def days_since_name(metric: str, limit: int) -> str:
    """Calculated-metric name for a threshold, e.g. DaysSince10Confirmed."""
    return f"DaysSince{limit}{metric.capitalize()}"


class AggregateDeriver:
    """
    Fills Record.calculated from a completed CounterStore.

    Threshold metrics are set only once the country has crossed the
    threshold on or before the record's day. Delta metrics compare the
    key's total with the previous day's; the first day of a key gets 0.
    Negative deltas (downward revisions) are kept as-is.
    """

    def __init__(self, store: CounterStore):
        self.store = store

    def derive(self, record: Record) -> Record:
        """
        Compute calculated metrics for one record, in place.

        Returns:
            The same record, for chaining
        """
        key = record.key

        for metric, limit in self.store.thresholds:
            crossed = self.store.crossing_date(key.country, metric, limit)
            if crossed is None:
                continue
            days = (key.date - crossed).days
            if days >= 0:
                record.calculated[days_since_name(metric, limit)] = days

        yesterday = key._replace(date=key.date - dt.timedelta(days=1))
        for metric, name in DELTA_METRICS:
            previous = self.store.total(yesterday, metric)
            if previous is None:
                record.calculated[name] = 0
            else:
                record.calculated[name] = self.store.total(key, metric) - previous

        return record

    def derive_all(self, records: Iterable[Record]) -> Iterator[Record]:
        """Derive every record in the order given."""
        if not self.store.frozen:
            self.store.freeze()
        for record in records:
            yield self.derive(record)
