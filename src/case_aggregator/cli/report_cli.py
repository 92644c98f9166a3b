"""
Command-line interface for the case aggregation pipeline.

Usage:
    case-aggregator run [--format bulk|csv|json] [--config <path>] [options]
"""

import argparse
import datetime as dt
import io
import sys
import time
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import ValidationError

from case_aggregator.batch.pipeline import AggregationPipeline
from case_aggregator.batch.readers import StatusReader
from case_aggregator.batch.writers import WRITERS, get_writer
from case_aggregator.core.config import PipelineConfig, PipelineConfigLoader, build_config
from case_aggregator.core.errors import PipelineError
from case_aggregator.observability.logger import ROOT_LOGGER_NAME, get_logger, setup_logger
from case_aggregator.observability.metrics import record_run, write_metrics_textfile


logger = get_logger(__name__)


def load_config(args) -> PipelineConfig:
    """
    Build the run configuration from the config file and CLI flags.

    Raises:
        FileNotFoundError: If --config points to a missing file
        ValueError: If settings are invalid
    """
    overrides = {
        "start_date": args.start,
        "end_date": args.end,
        "data_dir": args.data_dir,
        "output_format": args.format,
    }
    if args.config:
        return PipelineConfigLoader(args.config).load(**overrides)
    return build_config(**overrides)


def run_command(args) -> int:
    """
    Execute an aggregation run.

    Args:
        args: Command-line arguments

    Returns:
        Process exit status
    """
    try:
        config = load_config(args)
    except (FileNotFoundError, ValidationError, ValueError) as e:
        logger.error(f"Invalid configuration: {e}")
        return 1

    started = time.time()
    try:
        # Resolve the writer first: an unknown format fails before any fetch
        writer = get_writer(config.output_format)
        pipeline = AggregationPipeline(config)

        if args.status_json:
            logger.info(f"Reading status rows from {args.status_json}")
            records = pipeline.run_status_rows(StatusReader().read(args.status_json))
        else:
            records = pipeline.run(today=args.today)

        buffer = io.StringIO()
        emitted = writer.write(records, buffer)

        if args.output:
            Path(args.output).write_text(buffer.getvalue(), encoding="utf-8")
        else:
            sys.stdout.write(buffer.getvalue())
            sys.stdout.flush()

        logger.info(
            f"Wrote {emitted} of {len(records)} records as {writer.format_name}"
            + (f" to {args.output}" if args.output else "")
        )
        record_run("success", time.time() - started)
        return 0

    except PipelineError as e:
        logger.error(f"Aggregation run aborted: {e}", exc_info=True)
        record_run("failure", time.time() - started)
        return 1
    except ValueError as e:
        logger.error(f"Aggregation run aborted: {e}")
        record_run("failure", time.time() - started)
        return 1
    finally:
        if args.metrics_textfile:
            write_metrics_textfile(args.metrics_textfile)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="case-aggregator",
        description="Aggregate daily case-count reports into per-day time series",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Bulk-index output for every day up to yesterday
  case-aggregator run > cases.ndjson

  # CSV report for a fixed range
  case-aggregator run --format csv --start 2020-03-01 --end 2020-03-31

  # Settings from a YAML file, output to a file
  case-aggregator run --config config/pipeline.yaml --output cases.json --format json

  # Status-shaped JSON input instead of daily reports
  case-aggregator run --status-json data/status_rows.json --format csv
        """
    )

    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level (default: $LOG_LEVEL or INFO)"
    )
    parser.add_argument(
        "--log-format",
        default="json",
        choices=["json", "text"],
        help="Log output format (default: json)"
    )
    parser.add_argument(
        "--env-file",
        default=None,
        help="Path to a .env file (default: search from the working directory)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run the aggregation pipeline")
    run_parser.add_argument(
        "--config",
        default=None,
        help="Path to pipeline configuration YAML file"
    )
    run_parser.add_argument(
        "--format",
        default=None,
        choices=sorted(WRITERS),
        help="Output format (default: bulk)"
    )
    run_parser.add_argument(
        "--start",
        type=dt.date.fromisoformat,
        default=None,
        help="First day to ingest, YYYY-MM-DD (default: 2020-01-22)"
    )
    run_parser.add_argument(
        "--end",
        type=dt.date.fromisoformat,
        default=None,
        help="Last day to ingest, YYYY-MM-DD (default: yesterday)"
    )
    run_parser.add_argument(
        "--today",
        type=dt.date.fromisoformat,
        default=None,
        help=argparse.SUPPRESS
    )
    run_parser.add_argument(
        "--data-dir",
        default=None,
        help="Directory for cached daily reports (default: data)"
    )
    run_parser.add_argument(
        "--status-json",
        default=None,
        help="Read status-shaped rows from a JSON file instead of daily reports"
    )
    run_parser.add_argument(
        "--output",
        default=None,
        help="Write output to a file instead of stdout"
    )
    run_parser.add_argument(
        "--metrics-textfile",
        default=None,
        help="Write Prometheus metrics to this file after the run"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.env_file:
        load_dotenv(args.env_file, override=True)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    setup_logger(ROOT_LOGGER_NAME, level=args.log_level, format_type=args.log_format)

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "run":
        return run_command(args)

    return 1


if __name__ == "__main__":
    sys.exit(main())
