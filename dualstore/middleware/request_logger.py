# ==============================================================================
# REQUEST LOGGER MIDDLEWARE
# ==============================================================================
# One access-log line per request with status and timing
# ==============================================================================

from __future__ import annotations

import logging
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
RESPONSE_TIME_HEADER = "X-Response-Time"


class RequestLoggerMiddleware(BaseHTTPMiddleware):
    """
    Access logging for every HTTP request.

    Reuses an inbound X-Request-ID when the caller sends one, otherwise
    generates a short id. Responses carry the id and the elapsed time.
    4xx/5xx responses are logged at WARNING.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        client = request.client.host if request.client else "-"
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.error(
                f"[{request_id}] {client} {request.method} {request.url.path} "
                f"failed after {duration_ms:.2f} ms: {e}"
            )
            raise

        duration_ms = (time.perf_counter() - start) * 1000
        level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            level,
            f"[{request_id}] {client} {request.method} {request.url.path} "
            f"{response.status_code} {duration_ms:.2f} ms",
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[RESPONSE_TIME_HEADER] = f"{duration_ms:.2f}ms"
        return response
