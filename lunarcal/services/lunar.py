"""Tithi, paksha and nakshatra labels for event occurrences.

Tags on events are entered by hand. ``suggest_lunar_tag`` derives a label
from the same local-noon instant the daily generator uses, but it is only
reported next to the manual tag and never replaces it.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, Optional

import swisseph as swe

from .ephem import body_position, local_noon, moon_illumination, to_jd
from .errors import InvalidInputError, validate_coordinates
from .models import Paksha

TITHI_NAMES = [
    "Shukla Pratipada",
    "Shukla Dwitiya",
    "Shukla Tritiya",
    "Shukla Chaturthi",
    "Shukla Panchami",
    "Shukla Shashthi",
    "Shukla Saptami",
    "Shukla Ashtami",
    "Shukla Navami",
    "Shukla Dashami",
    "Shukla Ekadashi",
    "Shukla Dwadashi",
    "Shukla Trayodashi",
    "Shukla Chaturdashi",
    "Purnima",
    "Krishna Pratipada",
    "Krishna Dwitiya",
    "Krishna Tritiya",
    "Krishna Chaturthi",
    "Krishna Panchami",
    "Krishna Shashthi",
    "Krishna Saptami",
    "Krishna Ashtami",
    "Krishna Navami",
    "Krishna Dashami",
    "Krishna Ekadashi",
    "Krishna Dwadashi",
    "Krishna Trayodashi",
    "Krishna Chaturdashi",
    "Amavasya",
]

NAKSHATRA_NAMES = [
    "Ashwini",
    "Bharani",
    "Krittika",
    "Rohini",
    "Mrigashira",
    "Ardra",
    "Punarvasu",
    "Pushya",
    "Ashlesha",
    "Magha",
    "Purva Phalguni",
    "Uttara Phalguni",
    "Hasta",
    "Chitra",
    "Swati",
    "Vishakha",
    "Anuradha",
    "Jyeshtha",
    "Mula",
    "Purva Ashadha",
    "Uttara Ashadha",
    "Shravana",
    "Dhanishtha",
    "Shatabhisha",
    "Purva Bhadrapada",
    "Uttara Bhadrapada",
    "Revati",
]

MASA_AMANTA = [
    "Chaitra",
    "Vaishakha",
    "Jyeshtha",
    "Ashadha",
    "Shravana",
    "Bhadrapada",
    "Ashwin",
    "Kartika",
    "Margashirsha",
    "Pausha",
    "Magha",
    "Phalguna",
]

NAKSHATRA_SPAN = 360.0 / 27.0
TITHIS_PER_PAKSHA = 15

_TITHI_INDEX = {name.lower(): idx for idx, name in enumerate(TITHI_NAMES)}
_NAKSHATRA_INDEX = {name.lower(): idx for idx, name in enumerate(NAKSHATRA_NAMES)}


def paksha_of_tithi(index: int) -> Paksha:
    return Paksha.SHUKLA if index < TITHIS_PER_PAKSHA else Paksha.KRISHNA


def tithi_index_from_phase(phase_angle: float) -> int:
    """Each tithi covers 1/30 of the synodic cycle (12 degrees of elongation)."""
    return int((phase_angle % 1.0) * 30) % 30


@dataclass(frozen=True)
class LunarTag:
    tithi: str
    paksha: Paksha
    nakshatra: Optional[str] = None

    @property
    def tithi_number(self) -> int:
        return _TITHI_INDEX[self.tithi.lower()] + 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tithi": self.tithi,
            "tithiNumber": self.tithi_number,
            "paksha": self.paksha.value,
            "nakshatra": self.nakshatra,
        }


def build_lunar_tag(tithi: str, paksha: str, nakshatra: Optional[str] = None) -> LunarTag:
    """Validate a hand-entered tag and normalise the names."""

    idx = _TITHI_INDEX.get((tithi or "").strip().lower())
    if idx is None:
        raise InvalidInputError("Unknown tithi", details={"tithi": tithi})
    try:
        pk = Paksha((paksha or "").strip().lower())
    except ValueError:
        raise InvalidInputError("paksha must be 'shukla' or 'krishna'", details={"paksha": paksha}) from None
    if paksha_of_tithi(idx) is not pk:
        raise InvalidInputError(
            "tithi does not belong to the given paksha",
            details={"tithi": TITHI_NAMES[idx], "paksha": pk.value},
        )
    nak_name = None
    if nakshatra:
        nak_idx = _NAKSHATRA_INDEX.get(nakshatra.strip().lower())
        if nak_idx is None:
            raise InvalidInputError("Unknown nakshatra", details={"nakshatra": nakshatra})
        nak_name = NAKSHATRA_NAMES[nak_idx]
    return LunarTag(tithi=TITHI_NAMES[idx], paksha=pk, nakshatra=nak_name)


@dataclass(frozen=True)
class LunarSuggestion:
    date: date
    tag: LunarTag
    masa: str

    def to_dict(self) -> Dict[str, Any]:
        body = self.tag.to_dict()
        body.update({"date": self.date.isoformat(), "hinduMonth": self.masa})
        return body


def suggest_lunar_tag(day: date, lat: float, lon: float, ayanamsha: str = "lahiri") -> LunarSuggestion:
    validate_coordinates(lat, lon)
    instant = local_noon(day, lon)
    idx = tithi_index_from_phase(moon_illumination(instant).phase_angle)

    jd = to_jd(instant)
    moon_lon, _, _ = body_position(jd, swe.MOON, sidereal=True, ayanamsha=ayanamsha)
    sun_lon, _, _ = body_position(jd, swe.SUN, sidereal=True, ayanamsha=ayanamsha)
    nak = NAKSHATRA_NAMES[int(moon_lon // NAKSHATRA_SPAN) % 27]
    masa = MASA_AMANTA[int(sun_lon // 30.0) % 12]

    tag = LunarTag(tithi=TITHI_NAMES[idx], paksha=paksha_of_tithi(idx), nakshatra=nak)
    return LunarSuggestion(date=day, tag=tag, masa=masa)


def check_lunar_tag(tag: LunarTag, day: date, lat: float, lon: float) -> Dict[str, Any]:
    """Compare a manual tag with the computed suggestion; never fails on mismatch."""

    suggestion = suggest_lunar_tag(day, lat, lon)
    agrees = {
        "tithi": tag.tithi == suggestion.tag.tithi,
        "paksha": tag.paksha is suggestion.tag.paksha,
        "nakshatra": None if tag.nakshatra is None else tag.nakshatra == suggestion.tag.nakshatra,
    }
    return {"tag": tag.to_dict(), "suggestion": suggestion.to_dict(), "agrees": agrees}
