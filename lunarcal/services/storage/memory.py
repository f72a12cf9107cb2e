"""In-process store for development and tests.

Keeps locations, daily rows and preferences in dictionaries guarded by a
single lock so API threads and the generation worker can share it.
"""

from __future__ import annotations

import threading
from dataclasses import replace
from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..errors import StorageError
from ..models import DailyAstronomyRecord, Preferences, SavedLocation

_LOCATION_FIELDS = {"name", "lat", "lon", "is_primary"}


class MemoryStore:
    def __init__(self) -> None:
        self._locations: Dict[int, SavedLocation] = {}
        self._rows: Dict[Tuple[date, int], DailyAstronomyRecord] = {}
        self._prefs = Preferences()
        self._next_id = 1
        self._lock = threading.Lock()

    def _clear_primary(self, keep: Optional[int] = None) -> None:
        for lid, loc in list(self._locations.items()):
            if loc.is_primary and lid != keep:
                self._locations[lid] = replace(loc, is_primary=False)

    # Saved locations ----------------------------------------------------

    def create_location(self, name: str, lat: float, lon: float, is_primary: bool = False) -> SavedLocation:
        with self._lock:
            lid = self._next_id
            self._next_id += 1
            if is_primary:
                self._clear_primary()
            loc = SavedLocation(id=lid, name=name, lat=lat, lon=lon, is_primary=is_primary)
            self._locations[lid] = loc
            return loc

    def get_location(self, location_id: int) -> Optional[SavedLocation]:
        with self._lock:
            return self._locations.get(location_id)

    def list_locations(self) -> List[SavedLocation]:
        with self._lock:
            return sorted(self._locations.values(), key=lambda loc: (not loc.is_primary, loc.name))

    def update_location(self, location_id: int, **patch: Any) -> Optional[SavedLocation]:
        unknown = set(patch) - _LOCATION_FIELDS
        if unknown:
            raise ValueError(f"unknown location fields: {sorted(unknown)}")
        with self._lock:
            loc = self._locations.get(location_id)
            if loc is None:
                return None
            if patch.get("is_primary"):
                self._clear_primary(keep=location_id)
            loc = replace(loc, **patch)
            self._locations[location_id] = loc
            return loc

    def delete_location(self, location_id: int) -> bool:
        with self._lock:
            if self._locations.pop(location_id, None) is None:
                return False
            for key in [k for k in self._rows if k[1] == location_id]:
                del self._rows[key]
            return True

    # Daily astronomy rows -----------------------------------------------

    def replace_range(self, location_id: int, records: Sequence[DailyAstronomyRecord]) -> int:
        # Build the full batch first so a bad record leaves the store untouched.
        batch = {}
        for rec in records:
            batch[(rec.date, location_id)] = rec.with_location(location_id)
        with self._lock:
            if location_id not in self._locations:
                raise StorageError(f"saved location {location_id} does not exist")
            self._rows.update(batch)
        return len(batch)

    def replace_all(self, location_id: int, records: Sequence[DailyAstronomyRecord], **patch: Any) -> SavedLocation:
        unknown = set(patch) - _LOCATION_FIELDS
        if unknown:
            raise ValueError(f"unknown location fields: {sorted(unknown)}")
        batch = {}
        for rec in records:
            batch[(rec.date, location_id)] = rec.with_location(location_id)
        with self._lock:
            loc = self._locations.get(location_id)
            if loc is None:
                raise StorageError(f"saved location {location_id} does not exist")
            if patch.get("is_primary"):
                self._clear_primary(keep=location_id)
            loc = replace(loc, **patch)
            self._locations[location_id] = loc
            for key in [k for k in self._rows if k[1] == location_id]:
                del self._rows[key]
            self._rows.update(batch)
            return loc

    def query_range(self, location_id: int, start: date, end: date) -> List[DailyAstronomyRecord]:
        with self._lock:
            rows = [
                rec
                for (day, lid), rec in self._rows.items()
                if lid == location_id and start <= day <= end
            ]
        rows.sort(key=lambda rec: rec.date)
        return rows

    def delete_records(self, location_id: int) -> int:
        with self._lock:
            keys = [k for k in self._rows if k[1] == location_id]
            for key in keys:
                del self._rows[key]
            return len(keys)

    def count_records(self, location_id: int) -> int:
        with self._lock:
            return sum(1 for (_, lid) in self._rows if lid == location_id)

    # Preferences --------------------------------------------------------

    def get_preferences(self) -> Preferences:
        with self._lock:
            return replace(self._prefs)

    def save_preferences(self, prefs: Preferences) -> Preferences:
        with self._lock:
            self._prefs = replace(prefs)
            return replace(self._prefs)
