class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class UnknownEmployeeError(ValidationError):
    """Raised when the user directory has no such employee."""

    def __init__(self, message: str = "Employee does not exist"):
        super().__init__(message)


class AlreadyCheckedInError(ValidationError):
    """Raised when a user already has an attendance record for the day."""

    def __init__(self, message: str = "You have already checked in today"):
        super().__init__(message)


class MarkedAbsentError(AlreadyCheckedInError):
    """The day's record was created by the absence sweep; it cannot be checked into."""

    def __init__(self, message: str = "You have already been marked absent today"):
        super().__init__(message)


class AlreadyCheckedOutError(ValidationError):
    def __init__(self, message: str = "You have already checked out today"):
        super().__init__(message)


class NoCheckInFoundError(ValidationError):
    def __init__(self, message: str = "No check-in record found for today"):
        super().__init__(message)


class InvalidIntervalError(ValidationError):
    """Raised when a check-out is not strictly after its check-in."""

    def __init__(self, message: str = "Check-out time must be after check-in time"):
        super().__init__(message)


class SweepTooEarlyError(ValidationError):
    """Raised when a day is swept before its absent threshold has passed."""

    def __init__(self, message: str = "Absences cannot be recorded before the absent threshold has passed"):
        super().__init__(message)


class StoreError(Exception):
    """Base exception for persistence failures."""


class UnavailableError(StoreError):
    """The backing store could not be reached. Surfaced to the caller, never retried here."""


class IndexNotReadyError(StoreError):
    """A table or index the query needs is still being built. Safe to retry shortly."""


class RecordNotFoundError(StoreError):
    """Raised by updates addressing an attendance id that does not exist."""


class DuplicateRecordError(StoreError):
    """The store already holds a record for this (user, day)."""
