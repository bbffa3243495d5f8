"""Shared kernel primitives (value objects, errors)."""

from .exceptions import (
    DomainException,
    ValidationError,
    InvalidScopeError,
    EntityNotFoundError,
    UnauthorizedError,
    ForbiddenError,
    ConcurrencyError,
)
from .value_objects import (
    OwnerType,
    OwnerRef,
    AccessLevel,
    Caller,
)

__all__ = [
    "DomainException",
    "ValidationError",
    "InvalidScopeError",
    "EntityNotFoundError",
    "UnauthorizedError",
    "ForbiddenError",
    "ConcurrencyError",
    "OwnerType",
    "OwnerRef",
    "AccessLevel",
    "Caller",
]
