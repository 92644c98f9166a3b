"""
Structured logging for case-aggregator.

Every log line goes to stderr, as JSON by default (python-json-logger)
or as plain text for local runs. stdout belongs to the output sink.
"""
import logging
import os
import sys
import time

from pythonjsonlogger import jsonlogger

ROOT_LOGGER_NAME = "case_aggregator"
LOG_LEVEL_ENV = "LOG_LEVEL"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

JSON_FIELDS = "%(timestamp)s %(level)s %(logger)s %(module)s %(function)s %(message)s"
TEXT_FORMAT = "%(asctime)s %(levelname)-8s %(name)s:%(funcName)s %(message)s"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON formatter with stable field names for log shippers.

    Emits timestamp, level, logger, module and function alongside the
    message and any `extra` fields passed by the caller.
    """

    def add_fields(self, log_record: dict, record: logging.LogRecord, message_dict: dict) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record["timestamp"] = log_record.get("timestamp") or self.formatTime(record, self.datefmt)
        log_record["level"] = (log_record.get("level") or record.levelname).upper()
        log_record["logger"] = record.name
        log_record["module"] = record.module
        log_record["function"] = record.funcName


def resolve_level(level: str | None) -> int:
    """Map a level name (or $LOG_LEVEL when None) to a logging level; INFO if unknown."""
    name = level or os.getenv(LOG_LEVEL_ENV, "INFO")
    return LOG_LEVELS.get(name.upper(), logging.INFO)


def setup_logger(
    name: str = ROOT_LOGGER_NAME,
    level: str | None = None,
    format_type: str = "json",
) -> logging.Logger:
    """
    Configure a logger with a single stderr handler.

    Calling it again replaces the handler, so the CLI can reconfigure
    the package logger after import-time defaults were applied.

    Args:
        name: Logger name
        level: Level name; falls back to $LOG_LEVEL, then INFO
        format_type: "json" or "text"

    Returns:
        The configured logger
    """
    log_level = resolve_level(level)

    if format_type == "json":
        formatter = CustomJsonFormatter(fmt=JSON_FIELDS, datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = logging.Formatter(fmt=TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(log_level)
    handler.setFormatter(formatter)

    logger = logging.getLogger(name)
    logger.setLevel(log_level)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.propagate = False

    return logger


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """
    Return a module logger under the package logger.

    Module loggers (case_aggregator.*) carry no handlers of their own and
    propagate to the package logger, which gets default settings the
    first time any module asks for a logger.
    """
    if not logging.getLogger(ROOT_LOGGER_NAME).handlers:
        setup_logger(ROOT_LOGGER_NAME)
    return logging.getLogger(name)


class log_operation:
    """
    Log the start, end and duration of a pipeline stage.

    Usage:
        with log_operation("Deriving aggregates", logger=logger, records=120):
            ...

    Exceptions are logged and then propagate unchanged.
    """

    def __init__(self, operation_name: str, logger: logging.Logger | None = None, **extra_fields):
        self.operation_name = operation_name
        self.logger = logger or get_logger()
        self.extra_fields = extra_fields
        self.start_time = None

    def _fields(self, **fields) -> dict:
        return {"operation": self.operation_name, **fields, **self.extra_fields}

    def __enter__(self):
        self.start_time = time.time()
        self.logger.info(f"Starting: {self.operation_name}", extra=self._fields())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        duration = round(time.time() - self.start_time, 3)

        if exc_type is None:
            self.logger.info(
                f"Completed: {self.operation_name}",
                extra=self._fields(duration_seconds=duration, status="success"),
            )
        else:
            self.logger.error(
                f"Failed: {self.operation_name}",
                extra=self._fields(
                    duration_seconds=duration,
                    status="error",
                    error_type=exc_type.__name__,
                    error_message=str(exc_val),
                ),
            )
        return False
