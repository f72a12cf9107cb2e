"""Typed failures raised by the astronomy core and its service layer.

The core never formats user-facing messages beyond the exception text; the
FastAPI app maps these to HTTP responses in one place.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class AppError(Exception):
    code = "INTERNAL_SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            body["details"] = self.details
        return body


class InvalidInputError(AppError):
    """Rejected before any computation starts."""

    code = "VALIDATION_ERROR"
    status_code = 400


class NotFoundError(AppError):
    code = "NOT_FOUND"
    status_code = 404


class MissingConfigurationError(AppError):
    """No active saved location and no temporary location.

    Distinct from NotFoundError: the installation was never given a default
    location.
    """

    code = "NO_ACTIVE_LOCATION"
    status_code = 409


class StorageError(AppError):
    code = "DATABASE_ERROR"
    status_code = 500


def validate_coordinates(lat: float, lon: float) -> None:
    """Fail fast on out-of-range coordinates; values are never clamped."""

    if lat is None or lon is None:
        raise InvalidInputError("Latitude and longitude are required", code="INVALID_COORDINATES")
    if not -90.0 <= lat <= 90.0:
        raise InvalidInputError("Invalid latitude", code="INVALID_COORDINATES", details={"lat": lat})
    if not -180.0 <= lon <= 180.0:
        raise InvalidInputError("Invalid longitude", code="INVALID_COORDINATES", details={"lon": lon})
