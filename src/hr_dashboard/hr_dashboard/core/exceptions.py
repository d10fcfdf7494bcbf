class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    http_status = 400


class AttendanceError(DomainError):
    """A clock/break transition that is not allowed from the current state."""

    code = "ATTENDANCE_ERROR"
    http_status = 409
    default_message = "Attendance operation rejected"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class AlreadyClockedIn(AttendanceError):
    code = "ALREADY_CLOCKED_IN"
    default_message = "Already clocked in today"


class AlreadyClockedOut(AttendanceError):
    code = "ALREADY_CLOCKED_OUT"
    default_message = "Already clocked out today"


class NoActiveSession(AttendanceError):
    code = "NO_ACTIVE_SESSION"
    default_message = "Not clocked in today"


class BreakStillActive(AttendanceError):
    code = "BREAK_STILL_ACTIVE"
    default_message = "End the current break before clocking out"


class BreakAlreadyActive(AttendanceError):
    code = "BREAK_ALREADY_ACTIVE"
    default_message = "A break is already in progress"


class NoActiveBreak(AttendanceError):
    code = "NO_ACTIVE_BREAK"
    default_message = "No break is in progress"


class BreakMismatch(AttendanceError):
    code = "BREAK_MISMATCH"
    default_message = "Break id does not match the active break"


class InvalidTimeOrdering(AttendanceError):
    code = "INVALID_TIME_ORDERING"
    http_status = 400
    default_message = "End time is before start time"


class NotFound(AttendanceError):
    code = "NOT_FOUND"
    http_status = 404
    default_message = "Not found"


class InfrastructureUnavailable(Exception):
    """Persistence or clock collaborator failure. Safe to retry with backoff."""

    code = "INFRASTRUCTURE_UNAVAILABLE"
    http_status = 503
