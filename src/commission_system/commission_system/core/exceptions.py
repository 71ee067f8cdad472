from __future__ import annotations

from typing import Optional

from .enums import EntityType


class DomainError(Exception):
    """Base exception for business rule violations."""

    status_code = 400


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidReferenceError(DomainError):
    """Raised when a foreign key field points at a row that does not exist."""

    def __init__(self, message: str, *, field: str, entity_type: EntityType, entity_id: int):
        super().__init__(message)
        self.field = field
        self.entity_type = entity_type
        self.entity_id = entity_id


class ConflictError(DomainError):
    """Raised when a delete is blocked by dependents or a unique field clashes."""

    status_code = 409

    def __init__(
        self,
        message: str,
        *,
        blocking_type: Optional[EntityType] = None,
        blocking_count: int = 0,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.blocking_type = blocking_type
        self.blocking_count = blocking_count
        self.field = field


class NotFoundError(DomainError):
    """Raised when the subject of an operation does not exist."""

    status_code = 404


class AuthenticationError(DomainError):
    """Raised when credentials or bearer tokens are invalid."""

    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    status_code = 403
