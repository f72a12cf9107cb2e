"""Generation job status endpoint."""

from fastapi import APIRouter

from ..schemas import JobStatus
from ..services.errors import NotFoundError
from ..services.job_store import STORE


router = APIRouter(prefix="/v1/jobs", tags=["jobs"])


@router.get("/{job_id}", response_model=JobStatus)
def get_job(job_id: str) -> JobStatus:
    job = STORE.get(job_id)
    if not job:
        raise NotFoundError("Job not found", code="JOB_NOT_FOUND", details={"job_id": job_id})
    return JobStatus(
        job_id=job_id,
        status=job["status"],
        location_id=job["payload"].get("location_id"),
        rows=job.get("rows"),
        error=job.get("error"),
    )
