"""
Daily report fetcher with a permanent local cache.

Published reports for past days are treated as immutable, so a report
is downloaded once and the local copy is reused on every later run.
"""

import datetime as dt
import os
import tempfile
from pathlib import Path

import requests

from case_aggregator.core.config import PipelineConfig
from case_aggregator.core.errors import FetchError
from case_aggregator.observability.logger import get_logger
from case_aggregator.observability.metrics import increment_counter, reports_loaded_total

logger = get_logger(__name__)


class ReportFetcher:
    """
    Guarantees a local copy of a day's report exists.

    No retries: a failed download is a data availability problem and
    aborts the run.
    """

    def __init__(self, config: PipelineConfig, session: requests.Session | None = None):
        """
        Initialize report fetcher.

        Args:
            config: Pipeline configuration (data_dir, url_template, timeout)
            session: HTTP session; a new one is created when omitted
        """
        self.data_dir = Path(config.data_dir)
        self.url_template = config.url_template
        self.file_date_format = config.file_date_format
        self.timeout = config.request_timeout_seconds
        self.session = session or requests.Session()

    def file_for_date(self, day: dt.date) -> Path:
        """Local path of the report for a day, e.g. data/01-22-2020.csv."""
        return self.data_dir / f"{day.strftime(self.file_date_format)}.csv"

    def url_for_date(self, day: dt.date) -> str:
        """Remote URL of the report for a day."""
        return self.url_template.format(date=day.strftime(self.file_date_format))

    def ensure_local(self, day: dt.date) -> Path:
        """
        Return the local report path for a day, downloading it if absent.

        Args:
            day: Calendar day of the report

        Returns:
            Path to a readable local copy

        Raises:
            FetchError: If the download fails; carries the attempted URL
        """
        path = self.file_for_date(day)
        if path.exists():
            logger.info(f"Using cached report for {day.isoformat()}: {path}")
            increment_counter(reports_loaded_total, origin="cache")
            return path

        url = self.url_for_date(day)
        logger.info(f"Fetching report for {day.isoformat()} from {url}")

        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(url, e) from e

        self._write_atomic(path, response.content, url)
        increment_counter(reports_loaded_total, origin="remote")
        return path

    def _write_atomic(self, path: Path, content: bytes, url: str) -> None:
        """Write to a sibling temp file and rename, so no partial file is cached."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".part")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(content)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise FetchError(url, e) from e
