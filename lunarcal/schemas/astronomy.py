"""Daily astronomy schemas used by the range-query endpoints."""

from __future__ import annotations

from pydantic import BaseModel, Field
from typing import List, Literal, Optional


class DailyAstronomyOut(BaseModel):
    date: str
    location_id: Optional[int] = Field(default=None, alias="locationId")
    percentage_visible: int = Field(..., ge=0, le=100, alias="percentageVisible")
    is_waxing: bool = Field(..., alias="isWaxing")
    phase: Optional[Literal["NEW_MOON", "FIRST_QUARTER", "FULL_MOON", "LAST_QUARTER"]] = None
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    moonrise: Optional[str] = None
    moonset: Optional[str] = None

    model_config = {"populate_by_name": True}


class DailyAstronomyResponse(BaseModel):
    daily_astronomy: List[DailyAstronomyOut] = Field(..., alias="dailyAstronomy")
    count: int
    source: Literal["saved", "temporary"]
    location_name: Optional[str] = Field(default=None, alias="locationName")

    model_config = {"populate_by_name": True}


class SunTimesOut(BaseModel):
    date: str
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    solar_noon: Optional[str] = Field(default=None, alias="solarNoon")
    dawn: Optional[str] = None
    dusk: Optional[str] = None

    model_config = {"populate_by_name": True}
