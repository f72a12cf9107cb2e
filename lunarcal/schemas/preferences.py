from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Literal, Optional


class TempLocationIn(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    lat: float
    lon: float


class TempLocationOut(BaseModel):
    name: str
    lat: float
    lon: float


class ActiveLocationIn(BaseModel):
    location_id: int = Field(..., alias="locationId")

    model_config = {"populate_by_name": True}


class PreferencesPatch(BaseModel):
    default_view: Optional[Literal["month", "week", "day"]] = Field(default=None, alias="defaultView")
    show_lunar_info: Optional[bool] = Field(default=None, alias="showLunarInfo")
    show_holidays: Optional[bool] = Field(default=None, alias="showHolidays")
    notifications: Optional[bool] = None

    model_config = {"populate_by_name": True}


class PreferencesOut(BaseModel):
    active_location_id: Optional[int] = Field(default=None, alias="activeLocationId")
    temp_location: Optional[TempLocationOut] = Field(default=None, alias="tempLocation")
    default_view: str = Field(..., alias="defaultView")
    show_lunar_info: bool = Field(..., alias="showLunarInfo")
    show_holidays: bool = Field(..., alias="showHolidays")
    notifications: bool

    model_config = {"populate_by_name": True}
