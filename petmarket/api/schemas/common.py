"""Response envelopes shared by every router."""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PageMeta(BaseModel):
    """Cursor pagination metadata."""

    next_cursor: str | None
    has_more: bool
    total: int | None = None


class ApiResponse(BaseModel, Generic[T]):
    """``{"success": true, "message": ..., "data": ...}``."""

    success: bool = True
    message: str | None = None
    data: T


class PaginatedResponse(BaseModel, Generic[T]):
    success: bool = True
    data: list[T]
    meta: PageMeta


class MessageResponse(BaseModel):
    success: bool = True
    message: str


class ErrorResponse(BaseModel):
    """Failure envelope written by the exception handlers."""

    success: bool = False
    message: str
    error: str | None = None
