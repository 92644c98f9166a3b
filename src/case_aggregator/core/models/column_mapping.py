"""
ColumnMapping model: which header column holds each required role.
"""

from pydantic import BaseModel, Field

REQUIRED_ROLES = ("country", "region", "confirmed", "deaths", "recovered")


class ColumnMapping(BaseModel):
    """
    Zero-based column index for each of the five required roles.

    Produced once per report file by the HeaderMapper.
    """

    country: int = Field(..., ge=0)
    region: int = Field(..., ge=0)
    confirmed: int = Field(..., ge=0)
    deaths: int = Field(..., ge=0)
    recovered: int = Field(..., ge=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "country": 0,
                "region": 1,
                "confirmed": 2,
                "deaths": 3,
                "recovered": 4
            }
        }
