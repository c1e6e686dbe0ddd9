"""
CodeCollab Backend — Request Logging Middleware
=================================================

What:  One access-log line per HTTP request, plus a warning for browser
       origins outside the CORS allow-list.
How:   Times the downstream call and logs method, path, status, duration,
       request id and client address. The level follows the status class:
           5xx → ERROR, 4xx → WARNING, otherwise INFO
       Health probes are not logged.

Example line:
    2024-01-15T12:00:00 [INFO] codecollab.access: PUT /api/projects/4f1c... 200 7.3ms [a1b2c3d4] from 10.0.0.7

Request bodies are never logged (they carry user code).
"""

import logging
import time
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from codecollab.middleware.request_id import request_id_var

logger = logging.getLogger("codecollab.access")

SKIP_PATHS = frozenset({"/api/health"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    Args:
        allowed_origins: CORS allow-list. Requests carrying an Origin header
            outside it are logged as blocked (CORSMiddleware itself just
            omits the CORS headers). None disables the check.
    """

    def __init__(self, app: ASGIApp, allowed_origins: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.allowed_origins = (
            frozenset(allowed_origins) if allowed_origins is not None else None
        )

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in SKIP_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        rid = request_id_var.get("")

        origin = request.headers.get("origin")
        if (
            origin
            and self.allowed_origins is not None
            and origin not in self.allowed_origins
            and "*" not in self.allowed_origins
        ):
            logger.warning("[%s] Blocked by CORS: %s", rid, origin)

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            request.method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )
        return response
