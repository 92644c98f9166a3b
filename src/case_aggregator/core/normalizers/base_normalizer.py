"""
Base normalizer interface for raw input rows.

All normalizers turn one raw row into a canonical Record and share
lenient integer parsing and country alias canonicalization.
"""

from abc import ABC, abstractmethod
from collections import Counter
from typing import Any, Mapping

from case_aggregator.core.errors import MalformedNumberError
from case_aggregator.core.models import Record
from case_aggregator.observability.logger import get_logger
from case_aggregator.observability.metrics import increment_counter, malformed_numbers_total

logger = get_logger(__name__)

DEFAULT_COUNTRY_ALIASES = {"Mainland China": "China"}


def parse_count(field_name: str, raw_value: Any) -> int:
    """
    Parse a reported count.

    Blank values mean "not reported" and parse as zero.

    Raises:
        MalformedNumberError: If a non-blank value is not an integer
    """
    if raw_value is None:
        return 0
    if isinstance(raw_value, bool):
        raise MalformedNumberError(field_name, str(raw_value))
    if isinstance(raw_value, int):
        return raw_value

    text = str(raw_value).strip()
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        raise MalformedNumberError(field_name, text) from None


class BaseNormalizer(ABC):
    """
    Abstract base class for row normalizers.

    Malformed numeric fields never abort a run: they are counted per
    field in `malformed` and replaced with zero.
    """

    def __init__(self, country_aliases: Mapping[str, str] | None = None):
        """
        Initialize normalizer.

        Args:
            country_aliases: Historical country names mapped to canonical names
        """
        self.country_aliases = dict(
            DEFAULT_COUNTRY_ALIASES if country_aliases is None else country_aliases
        )
        self.malformed: Counter[str] = Counter()

    @abstractmethod
    def normalize(self, raw: Any) -> Record:
        """
        Convert one raw row into a Record.

        Args:
            raw: The raw row in this normalizer's input shape

        Returns:
            Record with an empty `calculated` mapping
        """
        pass

    @property
    @abstractmethod
    def input_shape(self) -> str:
        """Return the input shape identifier."""
        pass

    def canonical_country(self, country: str) -> str:
        return self.country_aliases.get(country, country)

    def count(self, field_name: str, raw_value: Any) -> int:
        """Parse a count, substituting zero for malformed values."""
        try:
            return parse_count(field_name, raw_value)
        except MalformedNumberError as e:
            self.malformed[field_name] += 1
            increment_counter(malformed_numbers_total, field_name=field_name)
            logger.debug(f"Treating malformed count as zero: {e}")
            return 0

    def reset_malformed(self) -> Counter[str]:
        """Return the malformed-field tally and start a fresh one."""
        tally, self.malformed = self.malformed, Counter()
        return tally

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(aliases={self.country_aliases})"
