"""Single-user preference state: active saved location and temporary location."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Dict, Optional

from .errors import InvalidInputError, NotFoundError, validate_coordinates
from .models import Preferences, TemporaryLocation
from .storage import AstronomyStore, get_store


logger = logging.getLogger(__name__)

VIEWS = ("month", "week", "day")
_EDITABLE = {"default_view", "show_lunar_info", "show_holidays", "notifications"}


def get_preferences(store: Optional[AstronomyStore] = None) -> Preferences:
    return (store or get_store()).get_preferences()


def update_preferences(patch: Dict[str, Any], store: Optional[AstronomyStore] = None) -> Preferences:
    store = store or get_store()
    unknown = set(patch) - _EDITABLE
    if unknown:
        raise InvalidInputError(f"Unknown preference fields: {sorted(unknown)}")
    view = patch.get("default_view")
    if view is not None and view not in VIEWS:
        raise InvalidInputError("default_view must be one of month, week, day", details={"default_view": view})
    prefs = replace(store.get_preferences(), **{k: v for k, v in patch.items() if v is not None})
    return store.save_preferences(prefs)


def set_temp_location(name: str, lat: float, lon: float, store: Optional[AstronomyStore] = None) -> Preferences:
    """Switch range queries to on-the-fly computation for ``(lat, lon)``."""

    validate_coordinates(lat, lon)
    store = store or get_store()
    label = name or f"{lat:.4f}, {lon:.4f}"
    prefs = replace(store.get_preferences(), temp_location=TemporaryLocation(name=label, lat=lat, lon=lon))
    logger.info("temporary location set to %s (%.4f, %.4f)", label, lat, lon)
    return store.save_preferences(prefs)


def clear_temp_location(store: Optional[AstronomyStore] = None) -> Preferences:
    store = store or get_store()
    prefs = replace(store.get_preferences(), temp_location=None)
    return store.save_preferences(prefs)


def set_active_location(location_id: int, store: Optional[AstronomyStore] = None) -> Preferences:
    """Select the saved location used when no temporary location is set.

    The temporary location, if any, is left in place and keeps priority.
    """

    store = store or get_store()
    if store.get_location(location_id) is None:
        raise NotFoundError("Saved location not found", code="LOCATION_NOT_FOUND", details={"location_id": location_id})
    prefs = replace(store.get_preferences(), active_location_id=location_id)
    return store.save_preferences(prefs)
