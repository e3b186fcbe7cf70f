### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Middleware Package -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Portal Middleware Package

Contains request processing helpers:
- auth: session and ingest-key dependencies
- logging: request/response logging
- rate_limit: slowapi limiter and login attempt counters
"""

from .auth import (
    IngestContext,
    PortalContext,
    get_ingest_context,
    get_portal_context,
    get_session,
    require_session,
)
from .logging import RequestLoggingMiddleware

__all__ = [
    "IngestContext",
    "PortalContext",
    "RequestLoggingMiddleware",
    "get_ingest_context",
    "get_portal_context",
    "get_session",
    "require_session",
]
