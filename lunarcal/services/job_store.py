"""In-memory job store for bulk generation jobs.

Keeps job metadata in-process behind a threading lock shared by the API
and the worker thread. Each job carries an event that is set once it
reaches ``done`` or ``error``.
"""

import hashlib
import json
import threading
import time
import uuid
from typing import Any, Dict, Optional, Tuple

_STATUS = ("queued", "processing", "done", "error")
_FINISHED = ("done", "error")


class JobStore:
    def __init__(self) -> None:
        self._jobs: Dict[str, Dict[str, Any]] = {}
        self._events: Dict[str, threading.Event] = {}
        self._lock = threading.Lock()

    def _now(self) -> float:
        return time.time()

    def _hash(self, payload: dict) -> str:
        return hashlib.sha256(json.dumps(payload, sort_keys=True, default=str).encode()).hexdigest()

    def get(self, jid: str) -> Optional[dict]:
        with self._lock:
            job = self._jobs.get(jid)
            return dict(job) if job else None

    def create_or_get(self, payload: dict, idempotency_key: Optional[str] = None) -> Tuple[str, bool]:
        """Return ``(job_id, created)``.

        While a job for the same payload and key is still pending, its id is
        returned instead of queueing a second one.
        """

        fprint = self._hash({"payload": payload, "idk": idempotency_key or ""})
        with self._lock:
            for jid, meta in self._jobs.items():
                if meta["fingerprint"] == fprint and meta["status"] not in _FINISHED:
                    return jid, False
            jid = "gen_" + uuid.uuid4().hex[:18]
            self._jobs[jid] = {
                "status": "queued",
                "payload": payload,
                "created_at": self._now(),
                "fingerprint": fprint,
                "rows": None,
                "error": None,
            }
            self._events[jid] = threading.Event()
        return jid, True

    def update(self, jid: str, **patch: Any) -> None:
        status = patch.get("status")
        if status is not None and status not in _STATUS:
            raise ValueError(f"unknown job status: {status}")
        with self._lock:
            if jid not in self._jobs:
                return
            self._jobs[jid].update(patch)
            if status in _FINISHED:
                self._jobs[jid]["finished_at"] = self._now()
                self._events[jid].set()

    def wait(self, jid: str, timeout: Optional[float] = None) -> Optional[dict]:
        """Block until the job finishes or ``timeout`` elapses."""
        with self._lock:
            ev = self._events.get(jid)
        if ev is None:
            return None
        ev.wait(timeout)
        return self.get(jid)


# Global singleton store used by API and worker.
STORE = JobStore()
