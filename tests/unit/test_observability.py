"""
Unit tests for logging and metrics helpers.
"""

import json
import logging

import pytest

from case_aggregator.observability.logger import (
    ROOT_LOGGER_NAME,
    CustomJsonFormatter,
    get_logger,
    log_operation,
    setup_logger,
)
from case_aggregator.observability.metrics import (
    REGISTRY,
    record_run,
    write_metrics_textfile,
)


@pytest.mark.unit
class TestLogger:
    """Tests for logger setup"""

    def test_json_formatter_fields(self):
        formatter = CustomJsonFormatter(
            fmt="%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
        )
        record = logging.LogRecord(
            name="case_aggregator.test", level=logging.WARNING, pathname=__file__,
            lineno=1, msg="hello %s", args=("world",), exc_info=None, func="test_fn",
        )

        payload = json.loads(formatter.format(record))

        assert payload["message"] == "hello world"
        assert payload["level"] == "WARNING"
        assert payload["logger"] == "case_aggregator.test"
        assert payload["function"] == "test_fn"
        assert payload["timestamp"]

    def test_setup_logger_replaces_handlers(self):
        logger = setup_logger("case_aggregator.setup_test", level="debug")
        setup_logger("case_aggregator.setup_test", level="debug")

        assert len(logger.handlers) == 1
        assert logger.level == logging.DEBUG
        assert logger.propagate is False

    def test_unknown_level_falls_back_to_info(self):
        logger = setup_logger("case_aggregator.level_test", level="LOUD")

        assert logger.level == logging.INFO

    def test_module_loggers_share_package_handler(self):
        logger = get_logger("case_aggregator.some.module")

        assert logging.getLogger(ROOT_LOGGER_NAME).handlers
        assert logger.propagate is True


@pytest.mark.unit
class TestLogOperation:
    """Tests for the log_operation context manager"""

    def test_logs_start_and_completion(self, caplog):
        logger = logging.getLogger("ops_test")

        with caplog.at_level(logging.INFO, logger="ops_test"):
            with log_operation("Deriving", logger=logger, records=3):
                pass

        messages = [r.getMessage() for r in caplog.records]
        assert messages == ["Starting: Deriving", "Completed: Deriving"]
        assert caplog.records[1].status == "success"
        assert caplog.records[1].records == 3

    def test_logs_failure_and_reraises(self, caplog):
        logger = logging.getLogger("ops_test")

        with caplog.at_level(logging.INFO, logger="ops_test"):
            with pytest.raises(KeyError):
                with log_operation("Ingesting", logger=logger):
                    raise KeyError("boom")

        failure = caplog.records[-1]
        assert failure.levelno == logging.ERROR
        assert failure.getMessage() == "Failed: Ingesting"
        assert failure.error_type == "KeyError"


@pytest.mark.unit
class TestMetrics:
    """Tests for metrics helpers"""

    def test_record_run_counts_outcome(self):
        before = REGISTRY.get_sample_value("case_pipeline_runs_total", {"status": "failure"}) or 0.0

        record_run("failure", 0.5)

        assert REGISTRY.get_sample_value("case_pipeline_runs_total", {"status": "failure"}) == before + 1

    def test_write_metrics_textfile(self, tmp_path):
        path = tmp_path / "case_aggregator.prom"

        write_metrics_textfile(path)

        assert "case_reports_loaded_total" in path.read_text()
