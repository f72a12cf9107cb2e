from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Literal, Optional


class LunarTagOut(BaseModel):
    tithi: str
    tithi_number: int = Field(..., ge=1, le=30, alias="tithiNumber")
    paksha: Literal["shukla", "krishna"]
    nakshatra: Optional[str] = None

    model_config = {"populate_by_name": True}


class LunarSuggestionOut(LunarTagOut):
    date: str
    hindu_month: str = Field(..., alias="hinduMonth")


class LunarCheckIn(BaseModel):
    date: str
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    tithi: str
    paksha: str
    nakshatra: Optional[str] = None


class LunarAgreement(BaseModel):
    tithi: bool
    paksha: bool
    nakshatra: Optional[bool] = None


class LunarCheckOut(BaseModel):
    tag: LunarTagOut
    suggestion: LunarSuggestionOut
    agrees: LunarAgreement
