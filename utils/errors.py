"""
Typed errors raised by reservation, invitation and availability operations.

Every error carries a user-facing message, a machine-readable code and the
HTTP status the API answers with. app.register_error_handlers() turns them
into the standard JSON error envelope.
"""


class ReservationError(Exception):
    """Base class for request-scoped domain errors."""

    status_code = 400
    error_code = 'VALIDATION_ERROR'

    def __init__(self, message: str, error_code: str = None, status_code: int = None):
        self.message = message
        if error_code:
            self.error_code = error_code
        if status_code:
            self.status_code = status_code
        super().__init__(message)


class NotFoundError(ReservationError):
    """Space, reservation, invitation token or participant is absent."""

    status_code = 404
    error_code = 'NOT_FOUND'


class InvalidInputError(ReservationError):
    """Bad time range, date format or group size."""

    status_code = 400
    error_code = 'VALIDATION_ERROR'


class ConflictError(ReservationError):
    """Overlap, exhausted capacity, duplicate join or duplicate cancellation."""

    status_code = 409
    error_code = 'BOOKING_CONFLICT'


class ForbiddenError(ReservationError):
    """Requester is not the owner or organizer."""

    status_code = 403
    error_code = 'FORBIDDEN'


class ExpiredError(ReservationError):
    """Invitation token is past its validity window."""

    status_code = 410
    error_code = 'EXPIRED'


class InvalidStateError(ReservationError):
    """Operation not allowed in the reservation's current state."""

    status_code = 400
    error_code = 'INVALID_STATE'
