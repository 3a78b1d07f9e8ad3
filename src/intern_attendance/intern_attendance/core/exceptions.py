class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced record, token or evaluation does not exist."""


class ConflictError(DomainError):
    """Raised when a write collides with existing state (duplicates, finalized rows)."""


class InvalidTokenError(DomainError):
    """Raised when a scanned QR value is unknown or no longer active."""


class TokenExpiredError(InvalidTokenError):
    """Raised when an active QR token belongs to another day."""
