"""Daily astronomy range endpoints."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query

from ..schemas import DailyAstronomyOut, DailyAstronomyResponse, SunTimesOut
from ..services.daily_astronomy import generate_day
from ..services.ephem import sun_event_times
from ..services.errors import validate_coordinates
from ..services.reconciler import get_daily_astronomy


router = APIRouter(prefix="/v1/daily-astronomy", tags=["daily-astronomy"])


@router.get(
    "",
    response_model=DailyAstronomyResponse,
    summary="Daily moon and sun data for the current location",
)
def daily_astronomy(
    start_date: date = Query(..., alias="startDate", description="First civil day, ISO format"),
    end_date: date = Query(..., alias="endDate", description="Last civil day, inclusive"),
):
    """Serve stored rows for the active saved location, or compute them for
    the temporary location when one is set."""

    return get_daily_astronomy(start_date, end_date).to_dict()


@router.get(
    "/compute",
    response_model=DailyAstronomyOut,
    summary="Compute one day on the fly for explicit coordinates",
)
def daily_astronomy_compute(
    lat: float = Query(...),
    lon: float = Query(...),
    day: Optional[date] = Query(default=None, alias="date"),
):
    return generate_day(day or date.today(), lat, lon).to_dict()


@router.get(
    "/sun",
    response_model=SunTimesOut,
    summary="Sunrise, sunset, solar noon and civil twilight for one day",
)
def daily_sun_times(
    lat: float = Query(...),
    lon: float = Query(...),
    day: Optional[date] = Query(default=None, alias="date"),
):
    validate_coordinates(lat, lon)
    day = day or date.today()
    sun = sun_event_times(day, lat, lon, extended=True)
    return {
        "date": day.isoformat(),
        "sunrise": sun.sunrise,
        "sunset": sun.sunset,
        "solarNoon": sun.solar_noon,
        "dawn": sun.dawn,
        "dusk": sun.dusk,
    }
