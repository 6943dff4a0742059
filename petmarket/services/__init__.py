"""Service layer — business logic orchestration."""

from __future__ import annotations

import uuid


class ServiceError(Exception):
    """Base service exception."""


class ValidationError(ServiceError):
    """Invalid input field or value (-> HTTP 400)."""


class InsufficientStockError(ValidationError):
    """Requested quantity exceeds available stock (-> HTTP 400)."""

    def __init__(self, available: int | None, requested: int) -> None:
        if available is None:
            message = f"Insufficient stock. Requested: {requested}"
        else:
            message = f"Insufficient stock. Available: {available}, Requested: {requested}"
        super().__init__(message)
        self.available = available
        self.requested = requested


class AuthenticationError(ServiceError):
    """Authentication failure (-> HTTP 401)."""


class PermissionDeniedError(ServiceError):
    """Authenticated but not allowed to touch the resource (-> HTTP 403)."""


class NotFoundError(ServiceError):
    """Resource not found (-> HTTP 404)."""


class ConflictError(ServiceError):
    """Business rule conflict (-> HTTP 409)."""


class StoreError(ServiceError):
    """The backing store rejected or failed an operation (-> HTTP 500)."""


def require_owner(user, owner_id: uuid.UUID | None, resource: str) -> None:
    """Raise :class:`PermissionDeniedError` unless *user* owns the resource or is admin."""
    if user.role == "admin":
        return
    if owner_id is None or owner_id != user.id:
        raise PermissionDeniedError(f"not allowed to modify this {resource}")


def require_admin(user) -> None:
    """Raise :class:`PermissionDeniedError` unless *user* is an admin."""
    if user.role != "admin":
        raise PermissionDeniedError("admin role required")
