class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotEligibleError(AuthorizationError):
    """Raised when the employee's category may not use time keeping."""


class InvalidLocationError(ValidationError):
    """GPS fix missing or outside physical range."""


class LocationUnavailableError(DomainError):
    """The device reported that it could not acquire a GPS fix."""


class InvalidDurationError(ValidationError):
    """An adjustment value could not be parsed as a non-negative duration."""


class ReasonRequiredError(ValidationError):
    """Unlock was requested without a usable reason."""


class WeekNotApprovedError(ValidationError):
    """Unlock was requested for a week that is not approved."""


class ConflictError(DomainError):
    """A session is already open for this staff member."""


class NoOpenSessionError(DomainError):
    """Check-out requested but no session is open."""


class WeekLockedError(DomainError):
    """Mutation attempted on an approved week."""


class AlreadyApprovedError(DomainError):
    """Approve requested for a week that is already approved."""


class StorageUnavailableError(Exception):
    """The durable store failed; nothing was applied and the caller may retry."""
