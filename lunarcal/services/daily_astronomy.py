"""Daily astronomy generator.

Produces one :class:`DailyAstronomyRecord` per civil day for a fixed
coordinate pair. Phase data is sampled at each day's local noon; sun and
moon events are searched from the day's local midnight. A day's record
depends only on its own date and the coordinates, so stored batches and
on-the-fly ranges agree for the same inputs.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterator, List, Optional

from .ephem import local_noon, moon_event_times, moon_illumination, sun_event_times
from .errors import InvalidInputError, validate_coordinates
from .models import DailyAstronomyRecord, MoonIllumination, NamedPhase
from .phase import CANONICAL_PHASES, classify, classify_phase, cycle_distance


_CANONICAL_ANGLE = {name: angle for angle, name in CANONICAL_PHASES}


def _illumination_for(day: date, lon: float) -> MoonIllumination:
    return moon_illumination(local_noon(day, lon))


def _resolve_named_phase(
    prev: Optional[MoonIllumination],
    current: MoonIllumination,
    nxt: Optional[MoonIllumination],
) -> Optional[NamedPhase]:
    """Keep a named phase only on the day nearest its canonical angle.

    The daily phase step can be smaller than the tolerance window, so two
    consecutive days may both classify; the nearer one keeps the label and
    an exact tie goes to the earlier day.
    """

    name = classify_phase(current.phase_angle)
    if name is None:
        return None
    target = _CANONICAL_ANGLE[name]
    mine = cycle_distance(current.phase_angle, target)
    if prev is not None and classify_phase(prev.phase_angle) is name:
        if cycle_distance(prev.phase_angle, target) <= mine:
            return None
    if nxt is not None and classify_phase(nxt.phase_angle) is name:
        if cycle_distance(nxt.phase_angle, target) < mine:
            return None
    return name


def _build_record(
    day: date,
    lat: float,
    lon: float,
    prev: Optional[MoonIllumination],
    current: MoonIllumination,
    nxt: Optional[MoonIllumination],
) -> DailyAstronomyRecord:
    pct, waxing, _ = classify(current)
    sun = sun_event_times(day, lat, lon)
    moon = moon_event_times(day, lat, lon)
    return DailyAstronomyRecord(
        date=day,
        percentage_visible=pct,
        is_waxing=waxing,
        phase=_resolve_named_phase(prev, current, nxt),
        sunrise=sun.sunrise,
        sunset=sun.sunset,
        moonrise=moon.moonrise,
        moonset=moon.moonset,
    )


def iter_range(start: date, end: date, lat: float, lon: float) -> Iterator[DailyAstronomyRecord]:
    """Yield records for every civil day in ``[start, end]`` in ascending order."""

    validate_coordinates(lat, lon)
    if end < start:
        raise InvalidInputError(
            "endDate must not be before startDate",
            code="INVALID_DATE_RANGE",
            details={"startDate": start.isoformat(), "endDate": end.isoformat()},
        )

    one_day = timedelta(days=1)
    prev = _illumination_for(start - one_day, lon)
    current = _illumination_for(start, lon)
    day = start
    while day <= end:
        nxt = _illumination_for(day + one_day, lon)
        yield _build_record(day, lat, lon, prev, current, nxt)
        prev, current = current, nxt
        day += one_day


def generate_range(start: date, end: date, lat: float, lon: float) -> List[DailyAstronomyRecord]:
    """Records for ``[start, end]`` inclusive, one per civil day."""
    return list(iter_range(start, end, lat, lon))


def generate_day(day: date, lat: float, lon: float) -> DailyAstronomyRecord:
    return generate_range(day, day, lat, lon)[0]
