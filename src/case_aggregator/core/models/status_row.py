"""
StatusRow model for status-shaped input: one row per (key, status).
"""

import datetime as dt
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, Field, field_validator

Status = Literal["confirmed", "deaths", "recovered"]


class StatusRow(BaseModel):
    """
    Incremental case count for one status of one country/region/day.

    Several StatusRows for the same key sum into that key's daily totals.

    Attributes:
        country: Country name as published (aliases applied later)
        region: Sub-region, empty for country-level rows
        date: Day the count belongs to
        status: Which counter the cases add to
        cases: Raw count, kept as given; the normalizer parses it and
            treats anything that is not an integer as malformed
    """

    country: str = Field(..., validation_alias=AliasChoices("country", "Country"))
    region: str = Field("", validation_alias=AliasChoices("region", "Region", "province", "Province"))
    date: dt.date = Field(..., validation_alias=AliasChoices("date", "Date"))
    status: Status = Field(..., validation_alias=AliasChoices("status", "Status"))
    cases: Any = Field(0, validation_alias=AliasChoices("cases", "Cases"))

    @field_validator("date", mode="before")
    @classmethod
    def truncate_to_day(cls, v: Any) -> Any:
        if isinstance(v, dt.datetime):
            return v.date()
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("status", mode="before")
    @classmethod
    def lowercase_status(cls, v: Any) -> Any:
        return v.strip().lower() if isinstance(v, str) else v

    @field_validator("region", mode="before")
    @classmethod
    def none_region_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    class Config:
        json_schema_extra = {
            "example": {
                "country": "Italy",
                "region": "Lombardia",
                "date": "2020-03-01",
                "status": "confirmed",
                "cases": 984
            }
        }
