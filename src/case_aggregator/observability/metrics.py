"""
Prometheus metrics collection for case-aggregator

This module provides metrics instrumentation for monitoring report
retrieval, normalization quality and output volume. A batch run has no
long-lived endpoint to scrape, so the registry is written to a
node-exporter textfile at the end of the run.
"""
from pathlib import Path

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Histogram,
    write_to_textfile,
)


# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# INGESTION METRICS
# =======================

# Report files loaded, by where they came from
reports_loaded_total = Counter(
    name="case_reports_loaded_total",
    documentation="Total number of daily report files loaded",
    labelnames=["origin"],  # origin: cache, remote
    registry=REGISTRY,
)

# Rows normalized into records
rows_normalized_total = Counter(
    name="case_rows_normalized_total",
    documentation="Total number of raw rows normalized into records",
    labelnames=["input_shape"],  # input_shape: report, status
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

# Numeric fields that failed to parse and were treated as zero
malformed_numbers_total = Counter(
    name="case_malformed_numbers_total",
    documentation="Total number of malformed numeric fields replaced with zero",
    labelnames=["field_name"],
    registry=REGISTRY,
)

# =======================
# RUN METRICS
# =======================

# Records written by the output sink
records_emitted_total = Counter(
    name="case_records_emitted_total",
    documentation="Total number of records written to the output",
    labelnames=["format"],
    registry=REGISTRY,
)

# Completed runs
pipeline_runs_total = Counter(
    name="case_pipeline_runs_total",
    documentation="Total number of aggregation runs",
    labelnames=["status"],  # status: success, failure
    registry=REGISTRY,
)

# Run duration
pipeline_run_duration_seconds = Histogram(
    name="case_pipeline_run_duration_seconds",
    documentation="Wall-clock duration of an aggregation run in seconds",
    buckets=[1.0, 5.0, 15.0, 30.0, 60.0, 120.0, 300.0, 600.0],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def write_metrics_textfile(path: str | Path) -> None:
    """
    Write the registry to a textfile for node-exporter collection

    Args:
        path: Destination file; written atomically by prometheus_client
    """
    write_to_textfile(str(path), REGISTRY)


def increment_counter(counter: Counter, value: float = 1.0, **labels) -> None:
    """
    Increment a counter metric

    Args:
        counter: Prometheus Counter metric
        value: Amount to increment (default: 1.0)
        **labels: Label values for the metric
    """
    if labels:
        counter.labels(**labels).inc(value)
    else:
        counter.inc(value)


def observe_histogram(histogram: Histogram, value: float, **labels) -> None:
    """
    Observe a value in a histogram metric

    Args:
        histogram: Prometheus Histogram metric
        value: Value to observe
        **labels: Label values for the metric
    """
    if labels:
        histogram.labels(**labels).observe(value)
    else:
        histogram.observe(value)


# =======================
# RUN-LEVEL HELPERS
# =======================

def record_run(status: str, duration_seconds: float) -> None:
    """
    Record the outcome of one aggregation run.

    Args:
        status: "success" or "failure"
        duration_seconds: Run duration in seconds
    """
    increment_counter(pipeline_runs_total, status=status)
    observe_histogram(pipeline_run_duration_seconds, duration_seconds)
