"""Background worker that runs bulk daily-astronomy generation in-process."""

import logging
import threading
from datetime import date

from ..services.errors import AppError
from ..services.job_store import STORE
from ..services.locations import generate_for_location
from .queue import Q


logger = logging.getLogger(__name__)


def _parse(value):
    return date.fromisoformat(value) if value else None


def run_job(jid: str) -> None:
    job = STORE.get(jid)
    if job is None:
        return
    STORE.update(jid, status="processing")
    payload = job["payload"]
    try:
        rows = generate_for_location(
            payload["location_id"],
            start=_parse(payload.get("start")),
            end=_parse(payload.get("end")),
        )
    except AppError as exc:
        logger.warning("generation job %s failed: %s", jid, exc.message)
        STORE.update(jid, status="error", error=exc.code)
    except Exception:
        logger.exception("generation job %s failed", jid)
        STORE.update(jid, status="error", error="GENERATION_FAILED")
    else:
        STORE.update(jid, status="done", rows=rows)


def worker_loop() -> None:
    while True:
        jid = Q.get()
        try:
            run_job(jid)
        finally:
            Q.task_done()


_worker_thread = None


def ensure_worker_started() -> None:
    """Ensure a worker thread is running for generation jobs."""

    global _worker_thread
    if _worker_thread and _worker_thread.is_alive():
        return

    _worker_thread = threading.Thread(target=worker_loop, name="astronomy-generation", daemon=True)
    _worker_thread.start()
