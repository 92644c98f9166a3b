"""
Error taxonomy for the aggregation pipeline.

Every error except MalformedNumberError is fatal to the run.
"""

from typing import Iterable


class PipelineError(Exception):
    """Base class for errors that abort an aggregation run."""


class SchemaMappingError(PipelineError):
    """Raised when a header row does not yield every required column role."""

    def __init__(self, found: dict[str, int], missing: Iterable[str], header: str = ""):
        self.found = dict(found)
        self.missing = sorted(missing)
        self.header = header
        super().__init__(
            f"missing column mappings {self.missing}; found {self.found}"
        )


class FetchError(PipelineError):
    """Raised when a daily report cannot be retrieved from its remote origin."""

    def __init__(self, source: str, cause: BaseException | str):
        self.source = source
        self.cause = cause
        super().__init__(f"error fetching '{source}': {cause}")


class ReportReadError(PipelineError):
    """Raised when a locally cached report cannot be read."""

    def __init__(self, path: str, cause: BaseException | str):
        self.path = path
        self.cause = cause
        super().__init__(f"error reading {path}: {cause}")


class UnsupportedFormatError(PipelineError):
    """Raised for an output format selector with no registered writer."""

    def __init__(self, format_name: str, supported: Iterable[str]):
        self.format_name = format_name
        self.supported = sorted(supported)
        super().__init__(
            f"Unsupported output format: {format_name!r}. Supported: {self.supported}"
        )


class MalformedNumberError(ValueError):
    """
    Raised when a numeric field cannot be parsed as an integer.

    Never escapes the normalizers: the value is replaced with zero.
    """

    def __init__(self, field_name: str, raw_value: str):
        self.field_name = field_name
        self.raw_value = raw_value
        super().__init__(f"{field_name}: cannot parse {raw_value!r} as an integer")
