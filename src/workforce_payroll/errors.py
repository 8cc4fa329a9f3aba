"""Domain error taxonomy shared by services and the HTTP layer."""

from __future__ import annotations


class PayrollError(Exception):
    """Base class for payroll domain errors."""

    status_code = 500


class ValidationError(PayrollError):
    """Raised for bad input or an invariant violation.

    Carries a field-keyed message map, e.g. ``{"date": "End date must be
    after start date"}``.
    """

    status_code = 400

    def __init__(self, errors: dict[str, str], message: str = "Validation Error"):
        self.errors = errors
        super().__init__(message)


class NotFoundError(PayrollError):
    """Raised when a referenced entity does not exist."""

    status_code = 404

    def __init__(self, resource: str = "Resource", message: str | None = None):
        self.resource = resource
        super().__init__(message or f"{resource} not found")


class ConflictError(PayrollError):
    """Raised when a write collides with concurrent or existing state."""

    status_code = 409

    def __init__(self, field: str, message: str | None = None):
        self.field = field
        super().__init__(message or f"{field} already exists")
