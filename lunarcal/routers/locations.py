"""Saved location endpoints."""

from __future__ import annotations

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Body, Query, Response

from ..jobs.queue import enqueue_generation_job
from ..schemas import (
    GenerationRequest,
    JobStatus,
    SavedLocationCreate,
    SavedLocationCreated,
    SavedLocationOut,
    SavedLocationUpdate,
)
from ..services import locations as location_service
from ..services.errors import InvalidInputError
from ..services.models import SavedLocation
from ..services.storage import get_store


router = APIRouter(prefix="/v1/saved-locations", tags=["saved-locations"])


def _out(location: SavedLocation, with_count: bool = False) -> SavedLocationOut:
    count = get_store().count_records(location.id) if with_count else None
    return SavedLocationOut(
        id=location.id,
        name=location.name,
        lat=location.lat,
        lon=location.lon,
        is_primary=location.is_primary,
        record_count=count,
    )


def _parse_date(value, field: str):
    if value is None:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise InvalidInputError(f"{field} must be an ISO date", code="INVALID_DATE", details={field: value}) from None


@router.get("", response_model=List[SavedLocationOut])
def list_locations():
    return [_out(loc) for loc in location_service.list_saved_locations()]


@router.post("", response_model=SavedLocationCreated, status_code=201)
def create_location(
    response: Response,
    req: SavedLocationCreate = Body(
        ...,
        examples=[{"name": "Den Haag", "lat": 52.0705, "lon": 4.3007, "isPrimary": True}],
    ),
    wait: bool = Query(default=True, description="Generate the horizon before responding"),
):
    """Create a saved location and precompute its daily astronomy.

    With ``wait=false`` the generation runs as a background job and the
    response carries its id.
    """

    location, rows = location_service.create_saved_location(
        req.name, req.lat, req.lon, is_primary=req.is_primary, generate=wait
    )
    job_id = None
    if not wait:
        job_id = enqueue_generation_job(location.id)
        response.status_code = 202
    return SavedLocationCreated(location=_out(location, with_count=wait), rows=rows, job_id=job_id)


@router.get("/{location_id}", response_model=SavedLocationOut)
def get_location(location_id: int):
    return _out(location_service.get_saved_location(location_id), with_count=True)


@router.patch("/{location_id}", response_model=SavedLocationOut)
def update_location(location_id: int, req: SavedLocationUpdate):
    updated = location_service.update_saved_location(location_id, req.model_dump(exclude_none=True))
    return _out(updated, with_count=True)


@router.delete("/{location_id}", status_code=204)
def delete_location(location_id: int):
    location_service.delete_saved_location(location_id)
    return Response(status_code=204)


@router.post("/{location_id}/regenerate", response_model=JobStatus, status_code=202)
def regenerate_location(location_id: int, req: Optional[GenerationRequest] = None):
    """Queue a regeneration; rows are upserted on (date, location)."""

    req = req or GenerationRequest()
    location_service.get_saved_location(location_id)
    start = _parse_date(req.start_date, "startDate")
    end = _parse_date(req.end_date, "endDate")
    if (start is None) != (end is None):
        raise InvalidInputError("startDate and endDate must be given together", code="MISSING_REQUIRED_FIELD")
    if start and end and end < start:
        raise InvalidInputError("endDate must not be before startDate", code="INVALID_DATE_RANGE")
    jid = enqueue_generation_job(location_id, start, end, idempotency_key=req.idempotency_key)
    return JobStatus(job_id=jid, status="queued", location_id=location_id)
