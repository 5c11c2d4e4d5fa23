from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    ``code`` is a stable, machine-readable identifier the HTTP layer echoes back.
    """

    code = "domain_error"


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "validation_error"


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "forbidden"


class NotFoundError(DomainError):
    code = "not_found"


class AlreadyCheckedInError(DomainError):
    code = "already_checked_in"

    def __init__(self, message: str = "Already checked in today"):
        super().__init__(message)


class AlreadyCheckedOutError(DomainError):
    code = "already_checked_out"

    def __init__(self, message: str = "Already checked out today"):
        super().__init__(message)


class NoCheckInFoundError(DomainError):
    code = "no_check_in_found"

    def __init__(self, message: str = "No check-in record found for today"):
        super().__init__(message)


class ActiveRequestExistsError(DomainError):
    """An employee already has a pending/approved request that has not ended."""

    code = "active_request_exists"

    def __init__(self, request_id: int, status: str):
        self.request_id = request_id
        self.status = status
        super().__init__(
            f"You already have an active leave request ({status}). "
            "Please wait for it to be processed or cancel it before submitting a new one."
        )


class InvalidTransitionError(DomainError):
    code = "invalid_transition"

    def __init__(self, message: str, *, current_status: Optional[str] = None):
        self.current_status = current_status
        super().__init__(message)


class LocationRequiredError(ValidationError):
    code = "location_required"

    def __init__(self, message: str = "Location is required for check-in. Please enable location services."):
        super().__init__(message)


class OutsideCheckInRadiusError(ValidationError):
    code = "outside_check_in_radius"

    def __init__(self, distance_meters: float, radius_meters: int):
        self.distance_meters = round(distance_meters)
        self.radius_meters = radius_meters
        super().__init__(
            f"You are {self.distance_meters}m away from the office. "
            f"Please move within {radius_meters}m to check in."
        )


class MissingReasonError(DomainError):
    code = "missing_reason"

    def __init__(self, message: str = "Rejection reason is required"):
        super().__init__(message)


class PersistenceError(Exception):
    """The backing store failed; the unit of work was rolled back."""

    code = "persistence_error"
