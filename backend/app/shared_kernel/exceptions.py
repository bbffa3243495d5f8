"""Shared kernel exception hierarchy."""
from typing import Optional, Dict, Any


class DomainException(Exception):
    """Base exception for all domain errors."""

    default_code = "domain_error"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}


class ValidationError(DomainException):
    """Raised when domain validation fails."""

    default_code = "invalid_argument"


class InvalidScopeError(ValidationError):
    """Raised when a scope identifier cannot be parsed."""

    default_code = "invalid_scope"


class EntityNotFoundError(DomainException):
    """Raised when a domain entity is not found."""

    default_code = "not_found"


class UnauthorizedError(DomainException):
    """Raised when no valid caller identity is present."""

    default_code = "unauthorized"


class ForbiddenError(DomainException):
    """Raised when the caller lacks the required access level."""

    default_code = "forbidden"


class ConcurrencyError(DomainException):
    """Raised on concurrency conflicts."""

    default_code = "conflict"
