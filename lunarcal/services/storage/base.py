"""Repository interface consumed by the reconciler and location service."""

from __future__ import annotations

from datetime import date
from typing import Any, List, Optional, Protocol, Sequence

from ..models import DailyAstronomyRecord, Preferences, SavedLocation


class AstronomyStore(Protocol):
    # Saved locations ----------------------------------------------------

    def create_location(self, name: str, lat: float, lon: float, is_primary: bool = False) -> SavedLocation:
        ...

    def get_location(self, location_id: int) -> Optional[SavedLocation]:
        ...

    def list_locations(self) -> List[SavedLocation]:
        """Primary location first, then by name."""
        ...

    def update_location(self, location_id: int, **patch: Any) -> Optional[SavedLocation]:
        ...

    def delete_location(self, location_id: int) -> bool:
        """Delete a location and all of its daily rows."""
        ...

    # Daily astronomy rows -----------------------------------------------

    def replace_range(self, location_id: int, records: Sequence[DailyAstronomyRecord]) -> int:
        """Upsert rows on (date, location_id) as one all-or-nothing write."""
        ...

    def replace_all(self, location_id: int, records: Sequence[DailyAstronomyRecord], **patch: Any) -> SavedLocation:
        """Apply ``patch`` to the location and swap its whole row set for ``records``.

        One unit of work: on failure the location and its previous rows are
        left as they were.
        """
        ...

    def query_range(self, location_id: int, start: date, end: date) -> List[DailyAstronomyRecord]:
        """Rows within ``[start, end]`` ordered by date ascending."""
        ...

    def delete_records(self, location_id: int) -> int:
        """Drop every daily row of a location, keeping the location itself."""
        ...

    def count_records(self, location_id: int) -> int:
        ...

    # Preferences --------------------------------------------------------

    def get_preferences(self) -> Preferences:
        ...

    def save_preferences(self, prefs: Preferences) -> Preferences:
        ...
