class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class InvalidStateError(DomainError):
    """Raised when a record is not in a state that allows the action."""


class NotFoundError(DomainError):
    """Raised when a referenced user, project or record does not exist."""
