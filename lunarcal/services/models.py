"""Record types shared by the generator, the reconciler and the stores."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Any, Dict, Optional

RECORD_VERSION = 1


class NamedPhase(str, Enum):
    NEW_MOON = "NEW_MOON"
    FIRST_QUARTER = "FIRST_QUARTER"
    FULL_MOON = "FULL_MOON"
    LAST_QUARTER = "LAST_QUARTER"


class Paksha(str, Enum):
    SHUKLA = "shukla"
    KRISHNA = "krishna"


@dataclass(frozen=True)
class MoonIllumination:
    fraction: float  # illuminated disc fraction, 0..1
    phase_angle: float  # cycle position, 0=new 0.25=first quarter 0.5=full 0.75=last quarter


@dataclass(frozen=True)
class SunTimes:
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    solar_noon: Optional[str] = None
    dawn: Optional[str] = None  # civil twilight start
    dusk: Optional[str] = None  # civil twilight end


@dataclass(frozen=True)
class MoonTimes:
    moonrise: Optional[str] = None
    moonset: Optional[str] = None


@dataclass(frozen=True)
class DailyAstronomyRecord:
    """One civil day of moon/sun facts for a coordinate pair.

    ``location_id`` is set for rows owned by a saved location and ``None`` for
    records computed on the fly. Absent rise/set times are ``None``.
    """

    date: date
    percentage_visible: int
    is_waxing: bool
    phase: Optional[NamedPhase]
    sunrise: Optional[str] = None
    sunset: Optional[str] = None
    moonrise: Optional[str] = None
    moonset: Optional[str] = None
    location_id: Optional[int] = None
    version: int = field(default=RECORD_VERSION, compare=False)

    def with_location(self, location_id: Optional[int]) -> "DailyAstronomyRecord":
        return replace(self, location_id=location_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.isoformat(),
            "locationId": self.location_id,
            "percentageVisible": self.percentage_visible,
            "isWaxing": self.is_waxing,
            "phase": self.phase.value if self.phase else None,
            "sunrise": self.sunrise,
            "sunset": self.sunset,
            "moonrise": self.moonrise,
            "moonset": self.moonset,
        }


@dataclass(frozen=True)
class SavedLocation:
    id: int
    name: str
    lat: float
    lon: float
    is_primary: bool = False


@dataclass(frozen=True)
class TemporaryLocation:
    name: str
    lat: float
    lon: float


@dataclass
class Preferences:
    active_location_id: Optional[int] = None
    temp_location: Optional[TemporaryLocation] = None
    default_view: str = "month"
    show_lunar_info: bool = True
    show_holidays: bool = True
    notifications: bool = False
