"""
Shared error handling for the Unit Protection Service.
"""

from enum import Enum
from typing import Dict, Any, Optional

from opentelemetry import trace
from pydantic import BaseModel


class ErrorCodes(Enum):
    """Error codes surfaced to the request-handling layer."""

    UNKNOWN_USER = ("unknownUser", "Unknown user")
    ORDER_UNITS_NOT_FOUND = (
        "orderAcqUnitsNotFound",
        "Acquisitions units assigned to order cannot be found",
    )
    USER_HAS_NO_PERMISSIONS = (
        "userHasNoPermission",
        "User does not have permissions - operation is restricted",
    )

    def __init__(self, code: str, description: str):
        self.code = code
        self.description = description


class ErrorResponse(BaseModel):
    """Standard error response format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class ProtectionServiceException(Exception):
    """Base exception for the Unit Protection Service."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None,
                 status_code: Optional[int] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        # Get trace ID from current span
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ForbiddenError(ProtectionServiceException):
    """The acting user is unknown or is not allowed to proceed."""

    status_code = 403

    def __init__(self, error: ErrorCodes = ErrorCodes.UNKNOWN_USER, details: Optional[Dict[str, Any]] = None):
        self.error = error
        super().__init__(error.code, error.description, details)


class ValidationError(ProtectionServiceException):
    """Governing-unit data is incomplete or inconsistent."""

    status_code = 422

    def __init__(self, error: ErrorCodes = ErrorCodes.ORDER_UNITS_NOT_FOUND, details: Optional[Dict[str, Any]] = None):
        self.error = error
        super().__init__(error.code, error.description, details)


class CollaboratorError(ProtectionServiceException):
    """Failure raised by a lookup collaborator (assignments, units, memberships)."""

    status_code = 502

    def __init__(self, service: str, message: str = "Collaborator failure",
                 details: Optional[Dict[str, Any]] = None, status_code: Optional[int] = None):
        self.service = service
        super().__init__("COLLABORATOR_ERROR", f"{service}: {message}", details, status_code)
