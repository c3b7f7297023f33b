class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StoreUnavailableError(DomainError):
    """Raised when the document store rejects a write."""
