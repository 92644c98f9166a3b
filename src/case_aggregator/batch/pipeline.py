"""
Aggregation pipeline orchestration.

Coordinates the flow: fetch → map header → normalize → accumulate,
for every day in the range, then derive → hand off to the output sink.
"""

import datetime as dt
from typing import Iterable, Iterator, Sequence

from case_aggregator.batch.readers import ReportReader
from case_aggregator.batch.sources import ReportFetcher
from case_aggregator.core.aggregation import AggregateDeriver, CounterStore
from case_aggregator.core.config import PipelineConfig
from case_aggregator.core.models import Record, StatusRow
from case_aggregator.core.normalizers import (
    BaseNormalizer,
    ReportRowNormalizer,
    StatusRowNormalizer,
    merge_status_records,
)
from case_aggregator.core.schema import HeaderMapper
from case_aggregator.observability.logger import get_logger, log_operation

logger = get_logger(__name__)


def each_day(start: dt.date, end: dt.date) -> Iterator[dt.date]:
    """Yield every calendar day from start to end, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += dt.timedelta(days=1)


class AggregationPipeline:
    """
    Orchestrates one aggregation run.

    Flow:
    1. For each day from start_date to end_date (default: yesterday),
       ensure the day's report is cached locally
    2. Map that report's header row to column indexes
    3. Normalize every data row and stamp it with the day
    4. Accumulate each record into the run's CounterStore
    5. After all days are ingested, derive deltas and days-since metrics

    Days are processed strictly in ascending order and one at a time.
    Any fetch, read or header mapping error aborts the whole run.
    """

    def __init__(
        self,
        config: PipelineConfig,
        fetcher: ReportFetcher | None = None,
        reader: ReportReader | None = None,
        header_mapper: HeaderMapper | None = None,
    ):
        """
        Initialize aggregation pipeline.

        Args:
            config: Pipeline configuration
            fetcher: Report fetcher (built from config when omitted)
            reader: Report line reader
            header_mapper: Header row mapper
        """
        self.config = config
        self.fetcher = fetcher or ReportFetcher(config)
        self.reader = reader or ReportReader()
        self.header_mapper = header_mapper or HeaderMapper()
        self.store: CounterStore | None = None

    def new_store(self) -> CounterStore:
        """Start a fresh, empty store for a run."""
        self.store = CounterStore(self.config.threshold_pairs())
        return self.store

    def run(self, today: dt.date | None = None) -> list[Record]:
        """
        Ingest every day's report, then derive metrics.

        Args:
            today: Reference day for the default end date

        Returns:
            Finished records in ingestion order
        """
        start = self.config.start_date
        end = self.config.resolve_end_date(today)
        store = self.new_store()

        with log_operation("Ingesting daily reports", logger=logger,
                           start_date=start.isoformat(), end_date=end.isoformat()):
            records = self.ingest_reports(store, start, end)

        return self.derive(store, records)

    def run_status_rows(self, rows: Iterable[StatusRow]) -> list[Record]:
        """
        Ingest status-shaped rows, then derive metrics.

        Rows are ordered by day before ingestion so crossing dates are
        recorded in ascending day order, as with daily reports.
        """
        store = self.new_store()

        with log_operation("Ingesting status rows", logger=logger):
            records = self.ingest_status_rows(store, rows)

        return self.derive(store, records)

    def ingest_reports(self, store: CounterStore, start: dt.date, end: dt.date) -> list[Record]:
        """
        Fetch, normalize and accumulate every day's report.

        Raises:
            FetchError: If a report cannot be downloaded
            ReportReadError: If a cached report cannot be read
            SchemaMappingError: If a report's header lacks a required column
        """
        records: list[Record] = []
        for day in each_day(start, end):
            path = self.fetcher.ensure_local(day)
            header, rows = self.reader.read(path)
            records.extend(self.ingest_report(store, day, header, rows))
        logger.info(f"Ingested {len(records)} records from {start} to {end}")
        return records

    def ingest_report(
        self,
        store: CounterStore,
        day: dt.date,
        header: str,
        rows: Sequence[str],
    ) -> list[Record]:
        """
        Normalize and accumulate one day's rows under that day's header.

        The header is mapped before any row is touched, so a report with
        an unusable header contributes nothing.
        """
        mapping = self.header_mapper.map_header(header)
        normalizer = ReportRowNormalizer(mapping, self.config.country_aliases)

        records = []
        for row in rows:
            record = normalizer.normalize(row)
            record.date = day
            store.accumulate(record)
            records.append(record)

        logger.debug(f"Ingested {len(records)} rows for {day.isoformat()}")
        self._report_malformed(normalizer, day.isoformat())
        return records

    def ingest_status_rows(self, store: CounterStore, rows: Iterable[StatusRow]) -> list[Record]:
        normalizer = StatusRowNormalizer(self.config.country_aliases)
        ordered = sorted(rows, key=lambda row: row.date)
        partials = [normalizer.normalize(row) for row in ordered]
        self._report_malformed(normalizer, "status rows")

        records = merge_status_records(partials)
        for record in records:
            store.accumulate(record)

        logger.info(f"Ingested {len(ordered)} status rows into {len(records)} records")
        return records

    def derive(self, store: CounterStore, records: Sequence[Record]) -> list[Record]:
        """Second pass: freeze the store and compute calculated metrics."""
        store.freeze()
        with log_operation("Deriving aggregates", logger=logger, records=len(records)):
            return list(AggregateDeriver(store).derive_all(records))

    def _report_malformed(self, normalizer: BaseNormalizer, source: str) -> None:
        tally = normalizer.reset_malformed()
        if tally:
            logger.warning(
                f"Treated {sum(tally.values())} malformed counts as zero in {source}: "
                f"{dict(tally)}"
            )
