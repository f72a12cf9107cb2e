"""Storage adapters for saved locations, daily rows and preferences."""

from __future__ import annotations

import os
from typing import Optional

from .base import AstronomyStore
from .memory import MemoryStore

_STORE: Optional[AstronomyStore] = None


def _build_store() -> AstronomyStore:
    backend = os.getenv("STORAGE_BACKEND", "memory").strip().lower()
    if backend == "sql":
        from .sql import SqlStore

        return SqlStore(os.getenv("DATABASE_URL", "sqlite:///./lunarcal.db"))
    return MemoryStore()


def get_store() -> AstronomyStore:
    """Process-wide store shared by API handlers and the generation worker."""

    global _STORE
    if _STORE is None:
        _STORE = _build_store()
    return _STORE


def set_store(store: Optional[AstronomyStore]) -> None:
    global _STORE
    _STORE = store


__all__ = ["AstronomyStore", "MemoryStore", "get_store", "set_store"]
