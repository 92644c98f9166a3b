"""
Reader for status-shaped JSON input.
"""

import json
from pathlib import Path

from pydantic import ValidationError

from case_aggregator.core.errors import ReportReadError
from case_aggregator.core.models import StatusRow


class StatusReader:
    """
    Reads a JSON array of status rows.

    Expected format:
    ```json
    [
      {"country": "Italy", "region": "", "date": "2020-03-01",
       "status": "confirmed", "cases": 1694}
    ]
    ```
    """

    def read(self, file_path: str | Path) -> list[StatusRow]:
        """
        Load and validate every status row in the file.

        Raises:
            ReportReadError: If the file is unreadable, not a JSON array,
                or contains a row that is not a valid status row
        """
        try:
            with open(file_path, encoding="utf-8") as f:
                payload = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ReportReadError(str(file_path), e) from e

        if not isinstance(payload, list):
            raise ReportReadError(str(file_path), "expected a JSON array of status rows")

        rows = []
        for index, item in enumerate(payload):
            try:
                rows.append(StatusRow.model_validate(item))
            except ValidationError as e:
                raise ReportReadError(str(file_path), f"row {index}: {e}") from e
        return rows
