"""
Notes API: Request ID Middleware
=================================

What:  Gives every request a short correlation ID and echoes it back in the
       ``X-Request-ID`` response header.
How:   A client-supplied ``X-Request-ID`` is reused; otherwise the first 8
       characters of a uuid4 are used. The ID is stored in a ContextVar so
       log records emitted while handling the request can carry it (see
       ``RequestIDLogFilter``).
"""

import logging
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from notes_api.schemas.note import ErrorEnvelope

logger = logging.getLogger(__name__)

# Coroutine-local: concurrent requests on one event loop each see their own value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns (or accepts) a request ID and returns it in the response headers."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get("X-Request-ID") or str(uuid.uuid4())[:8]
        token = request_id_var.set(rid)
        request.state.request_id = rid
        try:
            response = await call_next(request)
        except Exception as exc:
            # Unhandled errors would otherwise reach ServerErrorMiddleware,
            # which sits outside this middleware and drops the header
            logger.error("Unhandled error: %s", exc, exc_info=True)
            envelope = ErrorEnvelope(
                message="Internal server error", error=str(exc) or type(exc).__name__
            )
            response = JSONResponse(status_code=500, content=envelope.model_dump())
        finally:
            request_id_var.reset(token)

        response.headers["X-Request-ID"] = rid
        return response


class RequestIDLogFilter(logging.Filter):
    """Adds ``request_id`` to every log record ("-" outside a request)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "request_id"):
            record.request_id = request_id_var.get("") or "-"
        return True
