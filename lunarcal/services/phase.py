"""Map a continuous lunar cycle position onto named phases."""

from __future__ import annotations

from typing import Optional, Tuple

from .models import MoonIllumination, NamedPhase

PHASE_TOLERANCE = 0.02

# Cycle order; the first matching window wins.
CANONICAL_PHASES: Tuple[Tuple[float, NamedPhase], ...] = (
    (0.0, NamedPhase.NEW_MOON),
    (0.25, NamedPhase.FIRST_QUARTER),
    (0.5, NamedPhase.FULL_MOON),
    (0.75, NamedPhase.LAST_QUARTER),
)


def cycle_distance(angle: float, target: float) -> float:
    """Shortest distance between two cycle positions on the unit circle."""
    d = abs((angle - target) % 1.0)
    return min(d, 1.0 - d)


def classify_phase(angle: float, tolerance: float = PHASE_TOLERANCE) -> Optional[NamedPhase]:
    for target, name in CANONICAL_PHASES:
        if cycle_distance(angle, target) < tolerance:
            return name
    return None


def is_waxing(angle: float) -> bool:
    return (angle % 1.0) < 0.5


def percentage_visible(fraction: float) -> int:
    pct = int(fraction * 100.0 + 0.5)
    return max(0, min(100, pct))


def classify(illumination: MoonIllumination) -> Tuple[int, bool, Optional[NamedPhase]]:
    """Return ``(percentage_visible, is_waxing, phase)`` for one illumination sample."""
    return (
        percentage_visible(illumination.fraction),
        is_waxing(illumination.phase_angle),
        classify_phase(illumination.phase_angle),
    )
