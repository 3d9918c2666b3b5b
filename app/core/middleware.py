"""HTTP middleware for request ID propagation and access logging.

Usage:
    app.middleware("http")(request_id_middleware)
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request, Response

from app.core.exception_handlers import general_exception_handler
from app.core.logging import clear_request_id, set_request_id

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_ID_HEADER = "X-Request-ID"


async def request_id_middleware(request: Request, call_next) -> Response:
    """Tag each request with a correlation id and time it.

    The incoming request id header is reused when present, otherwise a UUID4
    is generated. The id is available to log records through contextvars for
    the duration of the request and is echoed back together with
    ``X-Request-Duration-ms``, including on the generic 500 rendered for
    unhandled errors.
    """

    settings = getattr(request.app.state, "settings", None)
    header_name = settings.log.request_id_header if settings else DEFAULT_REQUEST_ID_HEADER

    request_id = request.headers.get(header_name) or str(uuid.uuid4())
    set_request_id(request_id)
    start = time.perf_counter()
    try:
        try:
            response: Response = await call_next(request)
        except Exception as exc:
            # Unhandled errors would otherwise bypass this middleware
            response = await general_exception_handler(request, exc)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "http.request",
            extra={
                "request_method": request.method,
                "request_path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
    finally:
        clear_request_id()

    response.headers[header_name] = request_id
    response.headers.setdefault("X-Request-Duration-ms", f"{duration_ms:.2f}")
    return response
