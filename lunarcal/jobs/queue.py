"""Queue feeding the in-process generation worker."""

import queue
from datetime import date
from typing import Optional

from ..services.job_store import STORE

# Job ids only; payloads live in the job store.
Q: "queue.Queue[str]" = queue.Queue()


def enqueue_generation_job(
    location_id: int,
    start: Optional[date] = None,
    end: Optional[date] = None,
    idempotency_key: Optional[str] = None,
) -> str:
    """Queue a bulk generation for a saved location and return the job id.

    Without explicit bounds the worker generates the location's horizon.
    """

    payload = {
        "location_id": location_id,
        "start": start.isoformat() if start else None,
        "end": end.isoformat() if end else None,
    }
    jid, created = STORE.create_or_get(payload=payload, idempotency_key=idempotency_key)
    if created:
        Q.put(jid)
    return jid
