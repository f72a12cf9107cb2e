"""Preference endpoints: temporary and active location switching."""

from __future__ import annotations

from fastapi import APIRouter

from ..schemas import ActiveLocationIn, PreferencesOut, PreferencesPatch, TempLocationIn
from ..services import settings as settings_service
from ..services.models import Preferences


router = APIRouter(prefix="/v1/preferences", tags=["preferences"])


def _out(prefs: Preferences) -> PreferencesOut:
    temp = prefs.temp_location
    return PreferencesOut(
        active_location_id=prefs.active_location_id,
        temp_location={"name": temp.name, "lat": temp.lat, "lon": temp.lon} if temp else None,
        default_view=prefs.default_view,
        show_lunar_info=prefs.show_lunar_info,
        show_holidays=prefs.show_holidays,
        notifications=prefs.notifications,
    )


@router.get("", response_model=PreferencesOut)
def get_preferences():
    return _out(settings_service.get_preferences())


@router.patch("", response_model=PreferencesOut)
def update_preferences(req: PreferencesPatch):
    return _out(settings_service.update_preferences(req.model_dump(exclude_none=True)))


@router.put("/temp-location", response_model=PreferencesOut)
def set_temp_location(req: TempLocationIn):
    return _out(settings_service.set_temp_location(req.name or "", req.lat, req.lon))


@router.delete("/temp-location", response_model=PreferencesOut)
def clear_temp_location():
    return _out(settings_service.clear_temp_location())


@router.put("/active-location", response_model=PreferencesOut)
def set_active_location(req: ActiveLocationIn):
    return _out(settings_service.set_active_location(req.location_id))
