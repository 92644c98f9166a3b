"""
Header mapping for daily report files.

The published report layout has changed over time (column names, order,
extra columns), so every file's header row is mapped independently.
"""

import re

from case_aggregator.core.errors import SchemaMappingError
from case_aggregator.core.models import REQUIRED_ROLES, ColumnMapping
from case_aggregator.observability.logger import get_logger

logger = get_logger(__name__)


class HeaderMapper:
    """
    Infers which column holds each required role from a header row.

    Patterns are checked in priority order for each column; the first
    pattern that matches claims the column, and a role already claimed
    by an earlier column is not reassigned.
    """

    ROLE_PATTERNS: tuple[tuple[str, re.Pattern], ...] = (
        ("country", re.compile(r"country")),
        ("region", re.compile(r"region|province")),
        ("confirmed", re.compile(r"confirm")),
        ("deaths", re.compile(r"death")),
        ("recovered", re.compile(r"recover")),
    )

    @staticmethod
    def split_header(header_row: str) -> list[str]:
        """
        Normalize a header line into its ordered field names.

        Lowercases, treats '/' as a word separator and strips quotes.
        """
        normalized = header_row.lower().replace("/", "_").replace('"', "")
        return [field.strip() for field in normalized.strip().split(",")]

    def map_header(self, header_row: str) -> ColumnMapping:
        """
        Map a header row to column indexes.

        Args:
            header_row: Raw header line of a report file

        Returns:
            ColumnMapping for the five required roles

        Raises:
            SchemaMappingError: If any required role has no column
        """
        found: dict[str, int] = {}

        for index, field in enumerate(self.split_header(header_row)):
            role = self._match_role(field)
            if role is not None and role not in found:
                found[role] = index

        missing = [role for role in REQUIRED_ROLES if role not in found]
        if missing:
            raise SchemaMappingError(found, missing, header=header_row.strip())

        logger.debug(f"Mapped header columns: {found}")
        return ColumnMapping(**found)

    def _match_role(self, field: str) -> str | None:
        for role, pattern in self.ROLE_PATTERNS:
            if pattern.search(field):
                return role
        return None
