"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    category = "domain"

    def __init__(self, message: str, category: str | None = None):
        super().__init__(message)
        self.message = message
        if category is not None:
            self.category = category


class InvalidInputError(DomainException):
    """Numeric argument is malformed (not a number, negative rate, zero term)"""

    category = "input"


class OutOfRangeError(DomainException):
    """Value is well-formed but outside the business bounds"""

    category = "amount"


class MissingFieldError(DomainException):
    """Required text field is empty"""

    category = "purpose"


class UnauthenticatedError(DomainException):
    """No owner identity was supplied"""

    category = "auth"


class AllocationExhaustedError(DomainException):
    """Referral code candidates kept colliding past the retry bound"""

    category = "allocation"


class ConflictError(DomainException):
    """Store rejected a write because of a uniqueness constraint"""

    category = "conflict"


class StoreUnavailableError(DomainException):
    """Store could not be reached or failed mid-operation"""

    category = "store"


class NotFoundError(DomainException):
    """Requested record does not exist for this owner"""

    category = "not_found"
