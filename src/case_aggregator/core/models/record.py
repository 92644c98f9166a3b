"""
Record model representing one (country, region, date) observation.
"""

import datetime as dt
from typing import Any, NamedTuple

from pydantic import BaseModel, Field, field_validator, model_validator


class AggregationKey(NamedTuple):
    """Key for running totals: one country/region on one calendar day."""

    country: str
    region: str
    date: dt.date


class Record(BaseModel):
    """
    One observation for a (country, region, date) triple.

    Attributes:
        date: Calendar day of the report (timestamps are truncated to the day)
        country: Canonical country name
        region: Sub-region name, empty for country-level observations
        confirmed: Confirmed cases as reported
        deaths: Deaths as reported
        recovered: Recoveries as reported
        active: confirmed - deaths - recovered (not clamped)
        calculated: Derived metrics, filled only by the derive pass
    """

    date: dt.date | None = Field(None, alias="Date")
    country: str = Field(..., alias="Country")
    region: str = Field("", alias="Region")
    confirmed: int = Field(0, alias="Confirmed")
    deaths: int = Field(0, alias="Deaths")
    recovered: int = Field(0, alias="Recovered")
    active: int | None = Field(None, alias="Active")
    calculated: dict[str, int] = Field(default_factory=dict, alias="Calculated")

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v: Any) -> Any:
        """Drop any time-of-day component."""
        if isinstance(v, dt.datetime):
            return v.date()
        return v

    @model_validator(mode="after")
    def derive_active(self) -> "Record":
        if self.active is None:
            self.active = self.confirmed - self.deaths - self.recovered
        return self

    @property
    def key(self) -> AggregationKey:
        """Aggregation key; only valid once a date has been assigned."""
        if self.date is None:
            raise ValueError(f"record for {self.country!r}/{self.region!r} has no date")
        return AggregationKey(self.country, self.region, self.date)

    def to_document(self) -> dict[str, Any]:
        """Serialize with the published field names and an ISO date."""
        return self.model_dump(mode="json", by_alias=True)

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "Date": "2020-03-01",
                "Country": "Italy",
                "Region": "",
                "Confirmed": 1694,
                "Deaths": 34,
                "Recovered": 83,
                "Active": 1577,
                "Calculated": {
                    "DaysSince10Confirmed": 8,
                    "DaysSince100Confirmed": 6,
                    "DaysSince10Deaths": 4,
                    "ConfirmedDelta": 566,
                    "DeathsDelta": 5,
                    "RecoveredDelta": 37
                }
            }
        }
