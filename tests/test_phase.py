"""Phase classifier unit tests."""

import pytest

from lunarcal.services.models import MoonIllumination, NamedPhase
from lunarcal.services.phase import (
    classify,
    classify_phase,
    cycle_distance,
    is_waxing,
    percentage_visible,
)


@pytest.mark.parametrize(
    "angle,expected",
    [
        (0.0, NamedPhase.NEW_MOON),
        (0.01, NamedPhase.NEW_MOON),
        (0.99, NamedPhase.NEW_MOON),
        (0.26, NamedPhase.FIRST_QUARTER),
        (0.49, NamedPhase.FULL_MOON),
        (0.7601, NamedPhase.LAST_QUARTER),
        (0.1, None),
        (0.375, None),
        (0.52, None),
    ],
)
def test_classify_phase(angle, expected):
    assert classify_phase(angle) is expected


def test_tolerance_is_strict():
    assert classify_phase(0.25 + 0.0199) is NamedPhase.FIRST_QUARTER
    assert classify_phase(0.25 + 0.0201) is None


def test_cycle_distance_wraps():
    assert cycle_distance(0.98, 0.0) == pytest.approx(0.02)
    assert cycle_distance(0.02, 0.98) == pytest.approx(0.04)
    assert cycle_distance(0.5, 0.0) == pytest.approx(0.5)


def test_is_waxing_boundary():
    assert is_waxing(0.0)
    assert is_waxing(0.4999)
    assert not is_waxing(0.5)
    assert not is_waxing(0.99)


def test_percentage_visible_rounds_and_clamps():
    assert percentage_visible(0.004) == 0
    assert percentage_visible(0.005) == 1
    assert percentage_visible(0.555) == 56
    assert percentage_visible(1.0) == 100
    assert percentage_visible(1.2) == 100
    assert percentage_visible(-0.1) == 0


def test_classify_tuple():
    pct, waxing, phase = classify(MoonIllumination(fraction=0.998, phase_angle=0.495))
    assert pct == 100
    assert waxing is True
    assert phase is NamedPhase.FULL_MOON
