import os

os.environ.setdefault("EPHEMERIS_BACKEND", "moseph")

import pytest

from lunarcal.services.storage import MemoryStore, set_store


@pytest.fixture
def store():
    """Fresh process-wide store for each test."""
    mem = MemoryStore()
    set_store(mem)
    yield mem
    set_store(None)


@pytest.fixture
def short_horizon(monkeypatch):
    """Limit bulk generation to the rest of the current year."""
    from lunarcal.services import locations

    monkeypatch.setattr(locations, "HORIZON_EXTRA_YEARS", 0)
