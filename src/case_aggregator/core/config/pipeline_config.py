"""
Pipeline configuration management.

Loads run settings from an optional YAML file and provides the
defaults that reproduce the published daily-report layout.
"""

import datetime as dt
import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

DEFAULT_START_DATE = dt.date(2020, 1, 22)
DEFAULT_URL_TEMPLATE = (
    "https://raw.githubusercontent.com/CSSEGISandData/COVID-19/master/"
    "csse_covid_19_data/csse_covid_19_daily_reports/{date}.csv"
)
DATA_DIR_ENV = "CASE_AGGREGATOR_DATA_DIR"

# Bulk and CSV output number days from this crossing
DAY_COUNTER_THRESHOLD = ("confirmed", 10)


class PipelineConfig(BaseModel):
    """
    Settings for one aggregation run.

    Attributes:
        start_date: First day any report exists
        end_date: Last day to ingest; None means yesterday
        data_dir: Directory holding one cached report per day
        url_template: Remote report URL, with a {date} placeholder
        file_date_format: strftime pattern used for both file name and URL
        request_timeout_seconds: Per-request timeout for remote fetches
        output_format: bulk, csv or json
        country_aliases: Historical country names mapped to canonical ones
        thresholds: Metric name to the totals whose first crossing is tracked
    """

    start_date: dt.date = DEFAULT_START_DATE
    end_date: dt.date | None = None
    data_dir: Path = Path("data")
    url_template: str = DEFAULT_URL_TEMPLATE
    file_date_format: str = "%m-%d-%Y"
    request_timeout_seconds: float = Field(60.0, gt=0)
    output_format: str = "bulk"
    country_aliases: dict[str, str] = Field(
        default_factory=lambda: {"Mainland China": "China"}
    )
    thresholds: dict[Literal["confirmed", "deaths", "recovered"], list[int]] = Field(
        default_factory=lambda: {"confirmed": [10, 100], "deaths": [10, 100]}
    )

    @field_validator("url_template")
    @classmethod
    def template_has_date(cls, v: str) -> str:
        if "{date}" not in v:
            raise ValueError("url_template must contain a {date} placeholder")
        return v

    @field_validator("thresholds")
    @classmethod
    def check_thresholds(cls, v: dict[str, list[int]]) -> dict[str, list[int]]:
        for metric, limits in v.items():
            if any(limit < 0 for limit in limits):
                raise ValueError(f"thresholds for '{metric}' must be non-negative")
        day_metric, day_limit = DAY_COUNTER_THRESHOLD
        if day_limit not in v.get(day_metric, []):
            raise ValueError(
                f"thresholds for '{day_metric}' must include {day_limit}, "
                "where the Day counter starts"
            )
        return v

    @model_validator(mode="after")
    def check_range(self) -> "PipelineConfig":
        if self.end_date is not None and self.start_date > self.end_date:
            raise ValueError(
                f"start_date {self.start_date} is after end_date {self.end_date}"
            )
        return self

    def resolve_end_date(self, today: dt.date | None = None) -> dt.date:
        """
        Last day to ingest.

        Today's report is not assumed complete, so the default is yesterday.
        """
        if self.end_date is not None:
            return self.end_date
        end = (today or dt.date.today()) - dt.timedelta(days=1)
        if end < self.start_date:
            raise ValueError(
                f"start_date {self.start_date} is after end of range {end}"
            )
        return end

    def threshold_pairs(self) -> list[tuple[str, int]]:
        """Flatten thresholds into (metric, limit) pairs in declaration order."""
        return [
            (metric, limit)
            for metric, limits in self.thresholds.items()
            for limit in limits
        ]

    class Config:
        extra = "forbid"


class PipelineConfigLoader:
    """
    Loads PipelineConfig from a YAML file.

    Expected YAML format:
    ```yaml
    start_date: 2020-01-22
    data_dir: data
    output_format: csv
    country_aliases:
      Mainland China: China
    thresholds:
      confirmed: [10, 100]
      deaths: [10, 100]
    ```
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Pipeline configuration file not found: {config_path}")

    def load_settings(self) -> dict[str, Any]:
        """
        Parse the YAML document into a settings dictionary.

        Raises:
            ValueError: If the document is not a mapping
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if config is None:
            return {}
        if not isinstance(config, dict):
            raise ValueError("Configuration file must contain a mapping of settings")
        return config

    def load(self, **overrides: Any) -> PipelineConfig:
        """
        Build a PipelineConfig from the file, then apply overrides.

        Overrides whose value is None are ignored so unset CLI flags
        keep the file's value.
        """
        return build_config(self.load_settings(), **overrides)


def build_config(settings: dict[str, Any] | None = None, **overrides: Any) -> PipelineConfig:
    """
    Merge defaults, file settings, environment and overrides (lowest to highest).
    """
    merged: dict[str, Any] = dict(settings or {})

    env_data_dir = os.getenv(DATA_DIR_ENV)
    if env_data_dir:
        merged["data_dir"] = env_data_dir

    merged.update({k: v for k, v in overrides.items() if v is not None})
    return PipelineConfig(**merged)
