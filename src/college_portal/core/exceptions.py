class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class NotFoundError(DomainError):
    """Raised when a referenced document does not exist."""


class PartialPaymentError(DomainError):
    """Raised when a multi-fee payment stops after some fees were recorded."""

    def __init__(self, message: str, *, paid_count: int, total_count: int):
        super().__init__(message)
        self.paid_count = paid_count
        self.total_count = total_count
