class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced user, leave request or billing record is absent."""


class ConflictError(DomainError):
    """Raised when a unique key already exists or a state transition is no longer allowed."""


class InternalError(DomainError):
    """Raised when storage or a transaction fails."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ConcurrencyError(InternalError):
    """Raised when the database aborts a transaction over a lock conflict; the work can be retried."""
