"""Lunar attribution endpoints (tithi/paksha/nakshatra)."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Query

from ..schemas import LunarCheckIn, LunarCheckOut, LunarSuggestionOut
from ..services.errors import InvalidInputError
from ..services.lunar import build_lunar_tag, check_lunar_tag, suggest_lunar_tag


router = APIRouter(prefix="/v1/lunar", tags=["lunar"])


@router.get("/suggest", response_model=LunarSuggestionOut)
def lunar_suggest(
    day: date = Query(..., alias="date"),
    lat: float = Query(...),
    lon: float = Query(...),
):
    return suggest_lunar_tag(day, lat, lon).to_dict()


@router.post("/check", response_model=LunarCheckOut)
def lunar_check(req: LunarCheckIn):
    """Validate a hand-entered tag and report whether it matches the sky."""

    try:
        day = date.fromisoformat(req.date)
    except ValueError:
        raise InvalidInputError("date must be an ISO date", code="INVALID_DATE", details={"date": req.date}) from None
    tag = build_lunar_tag(req.tithi, req.paksha, req.nakshatra)
    return check_lunar_tag(tag, day, req.lat, req.lon)
