"""Swiss Ephemeris helpers for moon illumination and horizon events.

All clock outputs are local mean solar time derived from the longitude
(offset = lon / 15 hours). Civil timezone rules are not modelled.
"""

from __future__ import annotations

import math
import os
from datetime import date, datetime, timedelta, timezone
from typing import Optional

import swisseph as swe

from .models import MoonIllumination, MoonTimes, SunTimes


try:
    ENGINE_VERSION = f"swisseph-{swe.version}"
except AttributeError:
    ENGINE_VERSION = "swisseph-2.10"

AYANAMSHA_MAP = {
    "lahiri": swe.SIDM_LAHIRI,
    "krishnamurti": swe.SIDM_KRISHNAMURTI,
    "raman": swe.SIDM_RAMAN,
}

_JD_UNIX_EPOCH = 2440587.5


def _backend_flag() -> int:
    """Return the Swiss Ephemeris backend flag based on environment configuration."""

    raw_backend = os.getenv("EPHEMERIS_BACKEND")
    backend = raw_backend.strip().lower() if raw_backend else "swieph"
    return swe.FLG_MOSEPH if backend == "moseph" else swe.FLG_SWIEPH


def init_paths(ephe_dir: str | os.PathLike[str] | None) -> None:
    """Set the Swiss Ephemeris file search path when available."""

    if not ephe_dir:
        return

    path = os.fspath(ephe_dir)
    if os.path.isdir(path):
        swe.set_ephe_path(path)


def to_jd(moment: datetime) -> float:
    """Convert a datetime into Julian Day (UT). Naive values are taken as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).timestamp() / 86400.0 + _JD_UNIX_EPOCH


def _offset(lon: float) -> timedelta:
    return timedelta(hours=lon / 15.0)


def local_midnight(civil_date: date, lon: float) -> datetime:
    """UTC instant of 00:00 local mean time on ``civil_date``."""
    base = datetime(civil_date.year, civil_date.month, civil_date.day, tzinfo=timezone.utc)
    return base - _offset(lon)


def local_noon(civil_date: date, lon: float) -> datetime:
    """UTC instant of 12:00 local mean time on ``civil_date``."""
    return local_midnight(civil_date, lon) + timedelta(hours=12)


def format_local_time(jd: float, lon: float) -> str:
    """Format a Julian Day (UT) as local ``HH:mm``, truncated to the minute."""
    local_jd = jd + lon / 360.0
    day_fraction = (local_jd + 0.5) % 1.0
    minutes = int(day_fraction * 1440.0) % 1440
    hours, mins = divmod(minutes, 60)
    return f"{hours:02d}:{mins:02d}"


def body_position(jd_utc: float, body: int, sidereal: bool = False, ayanamsha: str = "lahiri") -> tuple[float, float, float]:
    """Return geocentric ecliptic (longitude, latitude, distance AU) for ``body``."""

    flag = _backend_flag()
    if sidereal:
        swe.set_sid_mode(AYANAMSHA_MAP.get(ayanamsha.lower(), swe.SIDM_LAHIRI))
        flag |= swe.FLG_SIDEREAL
    values, _ = swe.calc_ut(jd_utc, body, flag)
    return values[0] % 360.0, values[1], values[2]


def moon_illumination(instant: datetime) -> MoonIllumination:
    """Illuminated fraction and cycle position of the Moon at ``instant``.

    Depends on the instant only; the lunar phase is the same everywhere.
    """

    jd = to_jd(instant)
    sun_lon, sun_lat, sun_dist = body_position(jd, swe.SUN)
    moon_lon, moon_lat, moon_dist = body_position(jd, swe.MOON)

    slon, slat = math.radians(sun_lon), math.radians(sun_lat)
    mlon, mlat = math.radians(moon_lon), math.radians(moon_lat)
    cos_phi = math.sin(slat) * math.sin(mlat) + math.cos(slat) * math.cos(mlat) * math.cos(slon - mlon)
    phi = math.acos(max(-1.0, min(1.0, cos_phi)))
    # Sun-Moon-Earth angle; 0 at full moon
    inc = math.atan2(sun_dist * math.sin(phi), moon_dist - sun_dist * math.cos(phi))
    fraction = (1.0 + math.cos(inc)) / 2.0

    phase_angle = ((moon_lon - sun_lon) % 360.0) / 360.0
    if phase_angle >= 1.0:
        phase_angle = 0.0
    return MoonIllumination(fraction=min(1.0, max(0.0, fraction)), phase_angle=phase_angle)


def _horizon_event(jd_start: float, body: int, rsmi: int, lat: float, lon: float) -> Optional[float]:
    """Next rise/set/transit of ``body`` within one day of ``jd_start``, else None."""

    geopos = (lon, lat, 0.0)
    try:
        result, times = swe.rise_trans(jd_start, body, rsmi, geopos, 0.0, 0.0, _backend_flag())
    except swe.Error:  # type: ignore[attr-defined]
        return None
    # -2: circumpolar, the body stays above or below the horizon
    if result < 0 or not times:
        return None
    event = times[0]
    if event < jd_start or event >= jd_start + 1.0:
        return None
    return event


def _event_time(jd_start: float, body: int, rsmi: int, lat: float, lon: float) -> Optional[str]:
    event = _horizon_event(jd_start, body, rsmi, lat, lon)
    return format_local_time(event, lon) if event is not None else None


def sun_event_times(civil_date: date, lat: float, lon: float, extended: bool = False) -> SunTimes:
    """Sunrise and sunset for a civil day; solar noon and civil twilight too
    when ``extended``.

    Polar day or night yields ``None`` for the affected events.
    """

    jd_start = to_jd(local_midnight(civil_date, lon))
    sunrise = _event_time(jd_start, swe.SUN, swe.CALC_RISE, lat, lon)
    sunset = _event_time(jd_start, swe.SUN, swe.CALC_SET, lat, lon)
    if not extended:
        return SunTimes(sunrise=sunrise, sunset=sunset)
    return SunTimes(
        sunrise=sunrise,
        sunset=sunset,
        solar_noon=_event_time(jd_start, swe.SUN, swe.CALC_MTRANSIT, lat, lon),
        dawn=_event_time(jd_start, swe.SUN, swe.CALC_RISE | swe.BIT_CIVIL_TWILIGHT, lat, lon),
        dusk=_event_time(jd_start, swe.SUN, swe.CALC_SET | swe.BIT_CIVIL_TWILIGHT, lat, lon),
    )


def moon_event_times(civil_date: date, lat: float, lon: float) -> MoonTimes:
    """Moonrise and moonset for a civil day; either may be absent."""

    jd_start = to_jd(local_midnight(civil_date, lon))
    return MoonTimes(
        moonrise=_event_time(jd_start, swe.MOON, swe.CALC_RISE, lat, lon),
        moonset=_event_time(jd_start, swe.MOON, swe.CALC_SET, lat, lon),
    )
