"""Unified error handling — every failure becomes ``{"success": false, ...}``."""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from petmarket.api.schemas.common import ErrorResponse
from petmarket.dao.base import InvalidCursorError
from petmarket.services import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    StoreError,
    ValidationError,
)

log = structlog.get_logger(__name__)

_STATUS_MAP: dict[type[ServiceError], int] = {
    ValidationError: 400,
    AuthenticationError: 401,
    PermissionDeniedError: 403,
    NotFoundError: 404,
    ConflictError: 409,
    StoreError: 500,
}

_STORE_FAILURE = "store operation failed"


def _failure(status: int, message: str, error: str | None = None) -> JSONResponse:
    body = ErrorResponse(message=message, error=error)
    return JSONResponse(status_code=status, content=body.model_dump(exclude_none=True))


def _status_for(exc: ServiceError) -> int:
    for cls in type(exc).__mro__:
        if cls in _STATUS_MAP:
            return _STATUS_MAP[cls]
    return 500


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    status = _status_for(exc)
    if isinstance(exc, StoreError):
        log.error("store.failed", error=str(exc))
        return _failure(status, _STORE_FAILURE, error=str(exc))
    return _failure(status, str(exc))


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = []
    for err in exc.errors():
        loc = " → ".join(str(part) for part in err["loc"])
        messages.append(f"{loc}: {err['msg']}")
    return _failure(400, "; ".join(messages))


async def _invalid_cursor_handler(_request: Request, exc: InvalidCursorError) -> JSONResponse:
    return _failure(400, str(exc))


async def _store_error_handler(_request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Driver errors carry the server message on ``orig``.
    detail = str(getattr(exc, "orig", None) or exc)
    log.error("store.failed", error=detail, exc_type=type(exc).__name__)
    return _failure(500, _STORE_FAILURE, error=detail)


def register_error_handlers(app: FastAPI) -> None:
    """Register exception handlers on the app."""
    app.add_exception_handler(ServiceError, _service_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(InvalidCursorError, _invalid_cursor_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _store_error_handler)  # type: ignore[arg-type]
