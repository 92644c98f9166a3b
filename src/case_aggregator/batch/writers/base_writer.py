"""
Base writer interface for output sinks.

Writers render the whole output into memory before anything is written,
so a failure part-way through never leaves partial output behind.
"""

from abc import ABC, abstractmethod
from typing import IO, Iterable, Sequence

from case_aggregator.core.aggregation import days_since_name
from case_aggregator.core.config.pipeline_config import DAY_COUNTER_THRESHOLD
from case_aggregator.core.models import Record
from case_aggregator.observability.metrics import increment_counter, records_emitted_total

DAY_METRIC = days_since_name(*DAY_COUNTER_THRESHOLD)


def day_number(record: Record, day_metric: str = DAY_METRIC) -> int | None:
    """
    Per-country day counter: 1 on the day confirmed cases first exceeded 10.

    None until the country has crossed that threshold.
    """
    days = record.calculated.get(day_metric)
    return None if days is None else days + 1


class BaseWriter(ABC):
    """
    Abstract base class for output writers.
    """

    def __init__(self, day_metric: str = DAY_METRIC):
        self.day_metric = day_metric

    @property
    @abstractmethod
    def format_name(self) -> str:
        """Return the output format selector."""
        pass

    @abstractmethod
    def render(self, records: Sequence[Record]) -> str:
        """
        Render derived records to text.

        Args:
            records: Records after the derive pass

        Returns:
            Complete output document
        """
        pass

    def select(self, records: Iterable[Record]) -> list[Record]:
        """Keep only records whose country has started its day counter."""
        return [r for r in records if day_number(r, self.day_metric) is not None]

    def write(self, records: Iterable[Record], stream: IO[str]) -> int:
        """
        Render and write records to a text stream.

        Returns:
            Number of records emitted
        """
        records = list(records)
        emitted = self.emitted(records)
        output = self.render(records)
        stream.write(output)
        stream.flush()
        increment_counter(records_emitted_total, emitted, format=self.format_name)
        return emitted

    def emitted(self, records: Sequence[Record]) -> int:
        return len(self.select(records))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(format={self.format_name})"
