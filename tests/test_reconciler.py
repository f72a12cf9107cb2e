"""Reconciler precedence and saved/temporary consistency."""

import os

os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

from datetime import date

import pytest

from lunarcal.services import settings
from lunarcal.services.daily_astronomy import generate_range
from lunarcal.services.errors import InvalidInputError, MissingConfigurationError, NotFoundError
from lunarcal.services.locations import create_saved_location, delete_saved_location, generate_for_location
from lunarcal.services.reconciler import get_daily_astronomy, validate_range

DEN_HAAG = (52.0705, 4.3007)
START, END = date(2025, 10, 1), date(2025, 10, 10)


def _saved(store, name="Den Haag", lat=DEN_HAAG[0], lon=DEN_HAAG[1]):
    loc, _ = create_saved_location(name, lat, lon, store=store, generate=False)
    generate_for_location(loc.id, START, END, store=store)
    return loc


def test_no_location_configured(store):
    with pytest.raises(MissingConfigurationError) as exc:
        get_daily_astronomy(START, END, store=store)
    assert exc.value.code == "NO_ACTIVE_LOCATION"
    assert exc.value.status_code == 409


def test_saved_location_served_from_store(store):
    loc = _saved(store)
    result = get_daily_astronomy(START, END, store=store)
    assert result.source == "saved"
    assert result.count == 10
    assert all(r.location_id == loc.id for r in result.records)
    assert result.to_dict()["count"] == 10
    assert result.to_dict()["locationName"] == "Den Haag"


def test_temporary_location_wins(store):
    _saved(store)
    settings.set_temp_location("Tokyo", 35.6762, 139.6503, store=store)
    result = get_daily_astronomy(START, END, store=store)
    assert result.source == "temporary"
    assert result.location_name == "Tokyo"
    assert result.to_dict()["locationName"] == "Tokyo"
    assert all(r.location_id is None for r in result.records)

    settings.clear_temp_location(store=store)
    assert get_daily_astronomy(START, END, store=store).source == "saved"


def test_temporary_without_saved_location(store):
    settings.set_temp_location("", 10.0, 20.0, store=store)
    result = get_daily_astronomy(START, START, store=store)
    assert result.source == "temporary"
    assert result.location_name == "10.0000, 20.0000"


def test_saved_and_temporary_paths_agree(store):
    _saved(store)
    saved = get_daily_astronomy(START, END, store=store).records
    settings.set_temp_location("Here", *DEN_HAAG, store=store)
    temporary = get_daily_astronomy(START, END, store=store).records
    assert [r.with_location(None) for r in saved] == temporary
    assert temporary == generate_range(START, END, *DEN_HAAG)


def test_switching_active_location(store):
    first = _saved(store)
    second = _saved(store, name="Quito", lat=-0.1807, lon=-78.4678)
    assert settings.get_preferences(store=store).active_location_id == first.id
    settings.set_active_location(second.id, store=store)
    result = get_daily_astronomy(START, START, store=store)
    assert result.location_name == "Quito"
    assert result.records[0].location_id == second.id


def test_deleted_active_location(store):
    loc = _saved(store)
    store.delete_location(loc.id)
    with pytest.raises(NotFoundError) as exc:
        get_daily_astronomy(START, END, store=store)
    assert exc.value.code == "LOCATION_NOT_FOUND"


def test_deleting_through_service_clears_active(store):
    loc = _saved(store)
    delete_saved_location(loc.id, store=store)
    assert settings.get_preferences(store=store).active_location_id is None
    with pytest.raises(MissingConfigurationError):
        get_daily_astronomy(START, END, store=store)


def test_range_outside_horizon_is_empty(store):
    _saved(store)
    result = get_daily_astronomy(date(2030, 1, 1), date(2030, 1, 5), store=store)
    assert result.count == 0


def test_invalid_temp_location_leaves_preferences(store):
    with pytest.raises(InvalidInputError) as exc:
        settings.set_temp_location("Nowhere", 95.0, 0.0, store=store)
    assert exc.value.code == "INVALID_COORDINATES"
    assert settings.get_preferences(store=store).temp_location is None


def test_validate_range():
    with pytest.raises(InvalidInputError) as exc:
        validate_range(None, END)
    assert exc.value.code == "MISSING_REQUIRED_FIELD"
    with pytest.raises(InvalidInputError) as exc:
        validate_range(END, START)
    assert exc.value.code == "INVALID_DATE_RANGE"
    with pytest.raises(InvalidInputError) as exc:
        validate_range(date(2025, 1, 1), date(2025, 1, 11), max_days=10)
    assert exc.value.details == {"days": 11, "limit": 10}
    assert validate_range(date(2025, 1, 1), date(2025, 1, 10), max_days=10) == (date(2025, 1, 1), date(2025, 1, 10))


def test_range_limit_from_env(store, monkeypatch):
    monkeypatch.setenv("ASTRONOMY_MAX_RANGE_DAYS", "5")
    settings.set_temp_location("Here", *DEN_HAAG, store=store)
    with pytest.raises(InvalidInputError):
        get_daily_astronomy(START, END, store=store)


def test_preferences_update(store):
    prefs = settings.update_preferences({"default_view": "day", "show_holidays": False}, store=store)
    assert prefs.default_view == "day"
    assert prefs.show_holidays is False
    with pytest.raises(InvalidInputError):
        settings.update_preferences({"default_view": "year"}, store=store)
    with pytest.raises(InvalidInputError):
        settings.update_preferences({"theme": "dark"}, store=store)
    with pytest.raises(NotFoundError):
        settings.set_active_location(999, store=store)
