### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Rate Limiting Middleware -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Rate Limiting Middleware

Two layers:
- slowapi `limiter` for API traffic (per tenant and admin user) and
  ingestion traffic (per caller key prefix, IP and tenant hint).
- LoginAttemptLimiter for failed logins: fixed-window counters per source
  IP and per normalized email, built on the `limits` library.

Every trip answers 429 with a Retry-After header and a body that does not
say which counter tripped.
"""

import math
import time

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from limits import RateLimitItemPerSecond
from limits.storage import MemoryStorage
from limits.strategies import FixedWindowRateLimiter
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from portal.config import get_settings
from portal.errors import RateLimited
from portal.models.admin_user import normalize_email
from portal.utils import get_logger

logger = get_logger("portal.ratelimit")

LOGIN_LOCKOUT_CODE = "too_many_attempts"


def client_ip(request: Request) -> str:
    """Source IP for rate limiting"""
    return get_remote_address(request) or "unknown"


def api_key_func(request: Request) -> str:
    """
    Rate limit identifier for authenticated API traffic.

    Uses the tenant and admin user stored on request.state by the auth
    dependency; falls back to the client IP.
    """
    context = getattr(request.state, "portal_context", None)
    if context is not None:
        return f"api:{context.tenant_id}:{context.admin_user_id}"
    return f"api-ip:{client_ip(request)}"


def ingest_key_func(request: Request) -> str:
    """Rate limit identifier for ingestion: key prefix, IP and tenant hint"""
    settings = get_settings()
    key = request.headers.get(settings.ingest_key_header) or request.query_params.get("key") or ""
    key_prefix = key[:8] if key else "session"
    tenant_hint = (
        request.headers.get(settings.tenant_header)
        or request.query_params.get("tenant")
        or request.headers.get("host", "")
    )
    return f"ingest:{key_prefix}:{client_ip(request)}:{tenant_hint.strip().lower()}"


def api_rate_limit() -> str:
    return get_settings().api_rate_limit


def ingest_rate_limit() -> str:
    return get_settings().ingest_rate_limit


# Create limiter instance
limiter = Limiter(
    key_func=client_ip,
    storage_uri="memory://",
)


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """Uniform 429 for slowapi trips"""
    retry_after = 60
    limit = getattr(exc, "limit", None)
    if limit is not None and getattr(limit, "limit", None) is not None:
        retry_after = int(limit.limit.get_expiry())

    logger.warning(f"Rate limit exceeded: {request.method} {request.url.path} ip={client_ip(request)}")
    return JSONResponse(
        status_code=429,
        content={"error": "rate_limited", "message": "Too many requests, try again later"},
        headers={"Retry-After": str(retry_after)},
    )


class LoginAttemptLimiter:
    """
    Counts failed logins per IP and per email in fixed windows.

    check() is called before credentials are looked at; record_failure()
    after a rejected attempt. Successful logins are never counted.
    """

    def __init__(self, ip_max_attempts: int, email_max_attempts: int, window_seconds: int, storage=None):
        self.storage = storage or MemoryStorage()
        self.strategy = FixedWindowRateLimiter(self.storage)
        self.ip_limit = RateLimitItemPerSecond(ip_max_attempts, window_seconds)
        self.email_limit = RateLimitItemPerSecond(email_max_attempts, window_seconds)

    @classmethod
    def from_settings(cls) -> "LoginAttemptLimiter":
        settings = get_settings()
        return cls(
            ip_max_attempts=settings.login_ip_max_attempts,
            email_max_attempts=settings.login_email_max_attempts,
            window_seconds=settings.login_window_seconds,
        )

    def _counters(self, ip: str, email: str | None):
        counters = [(self.ip_limit, "login-ip", ip or "unknown")]
        normalized = normalize_email(email)
        if normalized:
            counters.append((self.email_limit, "login-email", normalized))
        return counters

    def check(self, ip: str, email: str | None) -> None:
        """
        Refuse the attempt when either counter is exhausted.

        Raises:
            RateLimited: code too_many_attempts, with retry_after seconds
        """
        for item, scope, identifier in self._counters(ip, email):
            if not self.strategy.test(item, scope, identifier):
                reset_at, _remaining = self.strategy.get_window_stats(item, scope, identifier)
                retry_after = max(1, math.ceil(reset_at - time.time()))
                logger.warning(f"Login locked out ({scope}) ip={ip}")
                raise RateLimited(
                    "Too many login attempts, try again later",
                    retry_after=retry_after,
                    code=LOGIN_LOCKOUT_CODE,
                )

    def record_failure(self, ip: str, email: str | None) -> None:
        for item, scope, identifier in self._counters(ip, email):
            self.strategy.hit(item, scope, identifier)

    def reset(self) -> None:
        """Forget every counter"""
        self.storage.reset()


login_limiter = LoginAttemptLimiter.from_settings()


def reset_rate_limits() -> None:
    """Clear login counters and slowapi storage"""
    login_limiter.reset()
    limiter.reset()
