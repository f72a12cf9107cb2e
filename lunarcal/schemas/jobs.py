from pydantic import BaseModel, Field
from typing import Literal, Optional


class GenerationRequest(BaseModel):
    """Optional explicit range; the location's horizon is used when omitted."""

    start_date: Optional[str] = Field(default=None, alias="startDate")
    end_date: Optional[str] = Field(default=None, alias="endDate")
    idempotency_key: Optional[str] = Field(default=None, alias="idempotencyKey")

    model_config = {"populate_by_name": True}


class JobStatus(BaseModel):
    """Current status of a generation job."""

    job_id: str = Field(..., alias="jobId")
    status: Literal["queued", "processing", "done", "error"]
    location_id: Optional[int] = Field(default=None, alias="locationId")
    rows: Optional[int] = None
    error: Optional[str] = None

    model_config = {"populate_by_name": True}
