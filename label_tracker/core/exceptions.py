"""
Domain exceptions.

Services raise these; the API layer maps them onto HTTP status codes
(see ``label_tracker.api.errors``).
"""

from typing import Optional


class DomainError(Exception):
    """Base class for expected, user-facing failures."""

    default_code = "E_DOMAIN"

    def __init__(self, message: str, code: Optional[str] = None, field: Optional[str] = None):
        self.message = message
        self.code = code or self.default_code
        self.field = field
        super().__init__(message)


class NotFoundError(DomainError):
    default_code = "E_NOT_FOUND"


class ConflictError(DomainError):
    """A uniqueness rule was violated (the record already exists)."""
    default_code = "E_ALREADY_EXISTS"


class InvalidStateError(DomainError):
    """The requested transition is not allowed from the current state."""
    default_code = "E_INVALID_STATE"


class BusinessRuleError(DomainError):
    """The operation is well-formed but rejected by a business rule."""
    default_code = "E_BUSINESS_RULE"


class PermissionDeniedError(DomainError):
    default_code = "E_FORBIDDEN"

    def __init__(self, message: str = "Forbidden", code: Optional[str] = None):
        super().__init__(message, code=code)
