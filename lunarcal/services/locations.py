"""Saved-location lifecycle and the bulk generation that comes with it."""

from __future__ import annotations

import logging
import os
import time
from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .daily_astronomy import generate_range
from .errors import InvalidInputError, NotFoundError, validate_coordinates
from .models import SavedLocation
from .storage import AstronomyStore, get_store


logger = logging.getLogger(__name__)

HORIZON_EXTRA_YEARS = 2

DEF_NAME = os.getenv("DEFAULT_LOCATION_NAME", "Den Haag")
DEF_LAT = float(os.getenv("DEFAULT_LOCATION_LAT", "52.0705"))
DEF_LON = float(os.getenv("DEFAULT_LOCATION_LON", "4.3007"))


def generation_horizon(today: Optional[date] = None) -> Tuple[date, date]:
    """Remainder of the current year (from ``today``) plus two full years."""

    today = today or date.today()
    return today, date(today.year + HORIZON_EXTRA_YEARS, 12, 31)


def _require(store: AstronomyStore, location_id: int) -> SavedLocation:
    location = store.get_location(location_id)
    if location is None:
        raise NotFoundError("Saved location not found", code="LOCATION_NOT_FOUND", details={"location_id": location_id})
    return location


def generate_for_location(
    location_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    store: Optional[AstronomyStore] = None,
    today: Optional[date] = None,
) -> int:
    """Compute and store daily rows for a saved location.

    Rows are computed completely before the single upsert, so a failure
    leaves previously stored rows untouched. Re-running is safe.
    """

    store = store or get_store()
    location = _require(store, location_id)
    if start is None or end is None:
        start, end = generation_horizon(today)

    t0 = time.time()
    records = generate_range(start, end, location.lat, location.lon)
    written = store.replace_range(location.id, records)
    logger.info(
        "generated %d daily astronomy rows for location %s (%s..%s) in %.2fs",
        written,
        location.id,
        start.isoformat(),
        end.isoformat(),
        time.time() - t0,
    )
    return written


def create_saved_location(
    name: str,
    lat: float,
    lon: float,
    is_primary: bool = False,
    store: Optional[AstronomyStore] = None,
    generate: bool = True,
    today: Optional[date] = None,
) -> Tuple[SavedLocation, int]:
    """Persist a location and, unless deferred, generate its horizon.

    The first location becomes the active one when none is configured. If
    generation fails the location is removed again and the previous active
    and primary locations are restored.
    """

    validate_coordinates(lat, lon)
    if not name or not name.strip():
        raise InvalidInputError("Location name is required", code="MISSING_REQUIRED_FIELD")
    store = store or get_store()
    previous_primary = [loc.id for loc in store.list_locations() if loc.is_primary] if is_primary else []
    prefs = store.get_preferences()
    previous_active = prefs.active_location_id
    location = store.create_location(name.strip(), lat, lon, is_primary=is_primary)

    if prefs.active_location_id is None or store.get_location(prefs.active_location_id) is None:
        store.save_preferences(replace(prefs, active_location_id=location.id))

    written = 0
    if generate:
        try:
            written = generate_for_location(location.id, store=store, today=today)
        except Exception:
            logger.exception("bulk generation failed for location %s; removing it", location.id)
            _discard_new_location(store, location.id, previous_active, previous_primary)
            raise
    return location, written


def _discard_new_location(
    store: AstronomyStore, location_id: int, previous_active: Optional[int], previous_primary: List[int]
) -> None:
    store.delete_location(location_id)
    store.save_preferences(replace(store.get_preferences(), active_location_id=previous_active))
    for lid in previous_primary:
        store.update_location(lid, is_primary=True)


def list_saved_locations(store: Optional[AstronomyStore] = None) -> List[SavedLocation]:
    return (store or get_store()).list_locations()


def get_saved_location(location_id: int, store: Optional[AstronomyStore] = None) -> SavedLocation:
    return _require(store or get_store(), location_id)


def update_saved_location(
    location_id: int,
    patch: Dict[str, Any],
    store: Optional[AstronomyStore] = None,
    today: Optional[date] = None,
) -> SavedLocation:
    """Apply a partial update; moved coordinates invalidate stored rows."""

    store = store or get_store()
    current = _require(store, location_id)
    patch = {k: v for k, v in patch.items() if v is not None}
    lat = patch.get("lat", current.lat)
    lon = patch.get("lon", current.lon)
    validate_coordinates(lat, lon)
    if "name" in patch and not str(patch["name"]).strip():
        raise InvalidInputError("Location name is required", code="MISSING_REQUIRED_FIELD")

    if (lat, lon) == (current.lat, current.lon):
        return store.update_location(location_id, **patch) or current

    # computed before touching the store; the move and the new rows land together
    start, end = generation_horizon(today)
    records = generate_range(start, end, lat, lon)
    try:
        updated = store.replace_all(location_id, records, **patch)
    except Exception:
        logger.exception("moving location %s failed; coordinates and rows unchanged", location_id)
        raise
    logger.info("location %s moved; stored %d fresh rows", location_id, len(records))
    return updated


def delete_saved_location(location_id: int, store: Optional[AstronomyStore] = None) -> None:
    store = store or get_store()
    _require(store, location_id)
    store.delete_location(location_id)
    prefs = store.get_preferences()
    if prefs.active_location_id == location_id:
        store.save_preferences(replace(prefs, active_location_id=None))
        logger.warning("active location %s deleted; no active location remains", location_id)


def ensure_default_location(store: Optional[AstronomyStore] = None, today: Optional[date] = None) -> Optional[SavedLocation]:
    """Create the configured default location on an empty installation."""

    store = store or get_store()
    if store.list_locations():
        return None
    location, _ = create_saved_location(DEF_NAME, DEF_LAT, DEF_LON, is_primary=True, store=store, today=today)
    logger.info("bootstrapped default location %s (%s)", location.id, location.name)
    return location
