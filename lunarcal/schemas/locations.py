from __future__ import annotations

from pydantic import BaseModel, Field
from typing import Optional


class SavedLocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    lat: float = Field(..., ge=-90.0, le=90.0)
    lon: float = Field(..., ge=-180.0, le=180.0)
    is_primary: bool = Field(default=False, alias="isPrimary")

    model_config = {"populate_by_name": True}


class SavedLocationUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=200)
    lat: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    lon: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    is_primary: Optional[bool] = Field(default=None, alias="isPrimary")

    model_config = {"populate_by_name": True}


class SavedLocationOut(BaseModel):
    id: int
    name: str
    lat: float
    lon: float
    is_primary: bool = Field(..., alias="isPrimary")
    record_count: Optional[int] = Field(default=None, alias="recordCount")

    model_config = {"populate_by_name": True}


class SavedLocationCreated(BaseModel):
    """Creation result; ``job_id`` is set when generation was deferred."""

    location: SavedLocationOut
    rows: int = 0
    job_id: Optional[str] = Field(default=None, alias="jobId")

    model_config = {"populate_by_name": True}
