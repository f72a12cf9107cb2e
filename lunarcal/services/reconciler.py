"""Serve daily astronomy from storage or compute it on the fly.

A temporary location, while present in preferences, always wins over the
active saved location. Both paths return records of the same shape; only
``source`` and each record's ``location_id`` differ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple

from .daily_astronomy import generate_range
from .errors import InvalidInputError, MissingConfigurationError, NotFoundError
from .models import DailyAstronomyRecord
from .storage import AstronomyStore, get_store

Source = Literal["saved", "temporary"]


def _max_range_days() -> int:
    return int(os.getenv("ASTRONOMY_MAX_RANGE_DAYS", "1200"))


@dataclass(frozen=True)
class DailyAstronomyResult:
    records: List[DailyAstronomyRecord]
    source: Source
    location_name: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.records)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dailyAstronomy": [rec.to_dict() for rec in self.records],
            "count": self.count,
            "source": self.source,
            "locationName": self.location_name,
        }


def validate_range(start: Optional[date], end: Optional[date], max_days: Optional[int] = None) -> Tuple[date, date]:
    """Return the bounds unchanged once they form an acceptable range."""
    if start is None or end is None:
        raise InvalidInputError("startDate and endDate are required", code="MISSING_REQUIRED_FIELD")
    if end < start:
        raise InvalidInputError(
            "endDate must not be before startDate",
            code="INVALID_DATE_RANGE",
            details={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )
    limit = max_days if max_days is not None else _max_range_days()
    days = (end - start).days + 1
    if days > limit:
        raise InvalidInputError(
            f"date range of {days} days exceeds the limit of {limit}",
            code="INVALID_DATE_RANGE",
            details={"days": days, "limit": limit},
        )
    return start, end


def get_daily_astronomy(
    start: Optional[date],
    end: Optional[date],
    store: Optional[AstronomyStore] = None,
) -> DailyAstronomyResult:
    start, end = validate_range(start, end)
    store = store or get_store()
    prefs = store.get_preferences()

    temp = prefs.temp_location
    if temp is not None:
        return DailyAstronomyResult(
            records=generate_range(start, end, temp.lat, temp.lon),
            source="temporary",
            location_name=temp.name,
        )

    if prefs.active_location_id is None:
        raise MissingConfigurationError("No active saved location is configured")

    location = store.get_location(prefs.active_location_id)
    if location is None:
        raise NotFoundError(
            "Active saved location not found",
            code="LOCATION_NOT_FOUND",
            details={"location_id": prefs.active_location_id},
        )
    return DailyAstronomyResult(
        records=store.query_range(location.id, start, end),
        source="saved",
        location_name=location.name,
    )
