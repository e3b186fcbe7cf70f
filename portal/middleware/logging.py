### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Request Logging Middleware -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Request Logging Middleware

Logs every request with attribution information:
- Who: masked ingest key, client IP, resolved tenant
- What: method and path
- Result: status code, response time

The request id is returned to the caller in X-Request-ID.
"""

import time
import uuid
from collections.abc import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from portal.config import get_settings
from portal.utils import get_logger

access_logger = get_logger("portal.access")

# Paths not worth a log line
QUIET_PATHS = ("/static/", "/favicon.ico")


def mask_key(key: str | None) -> str:
    """First 4 characters of a key, the rest elided"""
    if not key:
        return "none"
    return key[:4] + "..." if len(key) > 4 else "..."


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware for logging all portal requests

    Captures:
    - Request ID (short UUID)
    - Method and path (query string omitted, it may carry ?key=)
    - Ingest key (masked)
    - Client IP
    - Tenant (set on request.state by the auth dependencies)
    - Response status and time
    """

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = str(uuid.uuid4())[:8]
        request.state.request_id = request_id

        start_time = time.time()
        method = request.method
        path = request.url.path
        client_ip = request.client.host if request.client else "unknown"

        settings = get_settings()
        ingest_key = request.headers.get(settings.ingest_key_header) or request.query_params.get("key")

        try:
            response = await call_next(request)
            status_code = response.status_code
        except Exception as e:
            access_logger.error(f"[{request_id}] ERROR {method} {path} - {e!s}")
            raise

        response_time = (time.time() - start_time) * 1000  # ms
        tenant_id = getattr(request.state, "tenant_id", None) or "-"

        log_entry = (
            f"[{request_id}] "
            f"{method} {path} "
            f"| key={mask_key(ingest_key)} "
            f"| ip={client_ip} "
            f"| tenant={tenant_id} "
            f"| status={status_code} "
            f"| time={response_time:.2f}ms"
        )

        if status_code >= 500:
            access_logger.error(log_entry)
        elif status_code >= 400:
            access_logger.warning(log_entry)
        elif not path.startswith(QUIET_PATHS):
            access_logger.info(log_entry)

        response.headers["X-Request-ID"] = request_id
        return response
