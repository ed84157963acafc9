"""
Custom application exceptions
"""

from typing import Optional, Dict, Any


class RegistrationException(Exception):
    """Base exception for the registration application"""

    def __init__(
        self,
        message: str,
        code: str,
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class AuthenticationError(RegistrationException):
    """Missing admin credentials"""

    def __init__(self, message: str = "Authentication required"):
        super().__init__(
            message=message,
            code="AUTH_ERROR",
            status_code=401
        )


class AuthorizationError(RegistrationException):
    """Authorization related errors"""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(
            message=message,
            code="AUTH_FORBIDDEN",
            status_code=403
        )


class NotFoundError(RegistrationException):
    """Resource not found errors"""

    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} with id {identifier} not found"
        super().__init__(
            message=message,
            code="NOT_FOUND",
            status_code=404,
            details={"resource": resource, "id": identifier} if identifier is not None else {"resource": resource}
        )


class ValidationError(RegistrationException):
    """Malformed or disallowed input, raised before any claim is written"""

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict] = None):
        details = dict(details or {})
        if field:
            details["field"] = field
        super().__init__(
            message=message,
            code="VALIDATION_ERROR",
            status_code=422,
            details=details
        )


class ConflictError(RegistrationException):
    """A requested (seat, day) pair is already claimed"""

    def __init__(self, seat_id: int, day: str, seat_number: Optional[str] = None):
        self.seat_id = seat_id
        self.day = day
        self.seat_number = seat_number
        label = seat_number or seat_id
        super().__init__(
            message=f"Seat {label} is already reserved for {day}",
            code="SEAT_CONFLICT",
            status_code=409,
            details={"seat_id": seat_id, "seat_number": seat_number, "day": day}
        )


class StoreError(RegistrationException):
    """The unit of work could not complete because of the underlying store"""

    def __init__(self, message: str = "Reservation store is temporarily unavailable"):
        super().__init__(
            message=message,
            code="STORE_ERROR",
            status_code=503
        )


class TicketCodeExhaustedError(StoreError):
    """Could not find an unused ticket code within the attempt budget"""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            message=f"Could not generate a unique ticket code after {attempts} attempts"
        )


class RateLimitError(RegistrationException):
    """Rate limit exceeded error"""

    def __init__(self, limit: int, window: int):
        super().__init__(
            message=f"Rate limit exceeded. Max {limit} requests per {window} seconds",
            code="RATE_LIMIT_EXCEEDED",
            status_code=429,
            details={"limit": limit, "window": window}
        )
