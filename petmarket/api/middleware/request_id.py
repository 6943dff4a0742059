"""Request ID middleware — per-request correlation id bound into structlog."""

from __future__ import annotations

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

log = structlog.get_logger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def _parse_request_id(value: str) -> str | None:
    """Return the canonical form of *value* if it is a UUID, else None."""
    try:
        return str(uuid.UUID(value))
    except (ValueError, AttributeError):
        return None


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Reuse a client-supplied UUID request id or mint one, and log the request."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _parse_request_id(request.headers.get(REQUEST_ID_HEADER, ""))
        request_id = request_id or str(uuid.uuid4())

        tokens = structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            log.exception("request.failed", duration_ms=_elapsed_ms(start))
            raise
        else:
            log.info(
                "request.completed",
                status_code=response.status_code,
                duration_ms=_elapsed_ms(start),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            structlog.contextvars.reset_contextvars(**tokens)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 1)
