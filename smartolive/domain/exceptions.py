"""Centralized exception hierarchy for SmartOlive.

All domain and service exceptions inherit from :class:`SmartOliveError` so that
callers can catch a single base class when they need a broad safety net, yet
still match on specific subclasses where narrower handling is appropriate.

Hierarchy
---------
::

    SmartOliveError (base)
    ├── ValidationError          (bad input from caller)
    │   ├── InvalidRangeError    (moisture band out of bounds)
    │   ├── InvalidWindowError   (malformed time-of-day window)
    │   └── InvalidInputError    (evaluator called without inputs)
    ├── NotFoundError            (entity does not exist)
    │   └── ParcelNotFoundError  (unknown parcel identifier)
    ├── ConflictError            (illegal state transition)
    └── ConfigurationError       (missing / invalid config)
"""

from __future__ import annotations


class SmartOliveError(Exception):
    """Base exception for all SmartOlive errors.

    Parameters
    ----------
    message:
        Human-readable description. Also used verbatim as the reason text
        of fallback recommendations produced by the batch evaluator.
    detail:
        Optional machine-readable context dict attached to the error for
        structured logging.
    """

    def __init__(self, message: str = "", *, detail: dict | None = None) -> None:
        super().__init__(message)
        self.detail = detail or {}


# ── Caller errors ─────────────────────────────────────────────────────


class ValidationError(SmartOliveError):
    """Caller supplied invalid or incomplete input."""


class InvalidRangeError(ValidationError):
    """Moisture range bounds are outside [0, 100] or not ordered."""


class InvalidWindowError(ValidationError):
    """Time window bounds are missing or not times of day."""


class InvalidInputError(ValidationError):
    """Rule evaluation was requested without a parcel or weather snapshot."""


class NotFoundError(SmartOliveError):
    """Requested entity does not exist."""


class ParcelNotFoundError(NotFoundError):
    """No parcel is registered under the requested identifier."""

    def __init__(self, parcel_id: str) -> None:
        super().__init__(f"Parcel not found: {parcel_id}", detail={"parcel_id": parcel_id})
        self.parcel_id = parcel_id


class ConflictError(SmartOliveError):
    """Operation conflicts with existing state."""


# ── Setup errors ──────────────────────────────────────────────────────


class ConfigurationError(SmartOliveError):
    """Missing or invalid configuration."""
