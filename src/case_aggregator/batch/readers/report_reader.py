"""
Line reader for cached daily report files.
"""

from pathlib import Path

from case_aggregator.core.errors import ReportReadError


class ReportReader:
    """
    Reads a report file into its header line and data lines.

    Each file is opened, fully drained and closed before returning.
    A UTF-8 byte order mark on the header line is dropped.
    """

    def __init__(self, encoding: str = "utf-8-sig"):
        """
        Initialize report reader.

        Args:
            encoding: Text encoding of report files
        """
        self.encoding = encoding

    def read_lines(self, file_path: str | Path) -> list[str]:
        """
        Read every non-blank line of a report.

        Args:
            file_path: Path to the cached report

        Returns:
            Lines without their line terminators, header first

        Raises:
            ReportReadError: If the file cannot be opened or decoded
        """
        try:
            with open(file_path, encoding=self.encoding, newline="") as f:
                return [line.rstrip("\r\n") for line in f if line.strip()]
        except (OSError, UnicodeDecodeError) as e:
            raise ReportReadError(str(file_path), e) from e

    def read(self, file_path: str | Path) -> tuple[str, list[str]]:
        """
        Split a report into header and data lines.

        Raises:
            ReportReadError: If the file is unreadable or has no header line
        """
        lines = self.read_lines(file_path)
        if not lines:
            raise ReportReadError(str(file_path), "file is empty")
        return lines[0], lines[1:]
