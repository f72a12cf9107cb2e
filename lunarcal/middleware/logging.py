import os
import json
import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

_QUIET_PATHS = {"/__health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """One JSON access line per request when ``LOGGING_ENABLED=true``.

    Health probes are not logged. Every response carries its latency in
    ``X-Response-Time-Ms``.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = round((time.perf_counter() - start) * 1000, 2)
        response.headers["X-Response-Time-Ms"] = str(elapsed)

        enabled = os.getenv("LOGGING_ENABLED", "false").lower() == "true"
        if enabled and request.url.path not in _QUIET_PATHS:
            print(
                json.dumps(
                    {
                        "ts": time.time(),
                        "ip": request.client.host if request.client else None,
                        "method": request.method,
                        "endpoint": request.url.path,
                        "query": str(request.url.query) or None,
                        "status": response.status_code,
                        "latency_ms": elapsed,
                    }
                )
            )
        return response
