### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Session Manager -
# Author: Bailey Dixon
# Date: 09/04/2026
# Python: 3.11
####################

"""
Session Manager

Admin sessions are not stored server-side. A session is an HS256 JWT
carrying {adminUserId, tenantId, email} with a fixed 7 day expiry, held
in an HTTP-only SameSite=Lax cookie.

A token is trusted only when both its signature and expiry check out.
There is no revocation list: logout clears the cookie and expiry is the
only server-side bound on a token's life.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt
from fastapi import Request, Response

from portal.config import get_settings

ALGORITHM = "HS256"
TOKEN_TYPE = "portal_session"
SESSION_TTL = timedelta(days=7)


@dataclass(frozen=True)
class SessionPayload:
    """Decoded contents of a verified session token"""

    admin_user_id: int
    tenant_id: str
    email: str

    def to_dict(self) -> dict:
        return {
            "adminUserId": self.admin_user_id,
            "tenantId": self.tenant_id,
            "email": self.email,
        }


def request_is_secure(request: Request) -> bool:
    """Whether the request reached us over TLS (directly or via a proxy)"""
    forwarded = request.headers.get("X-Forwarded-Proto", "")
    return request.url.scheme == "https" or forwarded.split(",")[0].strip().lower() == "https"


class SessionManager:
    """Issues and verifies signed session tokens"""

    def __init__(self, secret_key: str, cookie_name: str = "portal_session", ttl: timedelta = SESSION_TTL):
        self.secret_key = secret_key
        self.cookie_name = cookie_name
        self.ttl = ttl

    def issue(self, payload: SessionPayload, now: datetime | None = None) -> str:
        """Sign a session token for the given payload"""
        issued_at = now or datetime.now(timezone.utc)
        claims = {
            "sub": str(payload.admin_user_id),
            "tid": payload.tenant_id,
            "email": payload.email,
            "type": TOKEN_TYPE,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
        }
        return jwt.encode(claims, self.secret_key, algorithm=ALGORITHM)

    def verify(self, token: str | None) -> SessionPayload | None:
        """
        Verify a session token.

        Returns:
            SessionPayload if signature and expiry are valid, otherwise None.
            Never raises.
        """
        if not token:
            return None
        try:
            claims = jwt.decode(
                token,
                self.secret_key,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "sub"]},
            )
        except jwt.ExpiredSignatureError:
            return None
        except jwt.InvalidTokenError:
            return None

        if claims.get("type") != TOKEN_TYPE:
            return None
        tenant_id = claims.get("tid")
        email = claims.get("email")
        try:
            admin_user_id = int(claims["sub"])
        except (TypeError, ValueError):
            return None
        if not tenant_id or not isinstance(tenant_id, str) or not isinstance(email, str):
            return None

        return SessionPayload(admin_user_id=admin_user_id, tenant_id=tenant_id, email=email)

    def set_cookie(self, response: Response, token: str, secure: bool = False) -> None:
        """Attach the session cookie to a response"""
        response.set_cookie(
            key=self.cookie_name,
            value=token,
            max_age=int(self.ttl.total_seconds()),
            httponly=True,
            samesite="lax",
            secure=secure,
            path="/",
        )

    def clear_cookie(self, response: Response, secure: bool = False) -> None:
        """Expire the session cookie (logout)"""
        response.delete_cookie(
            key=self.cookie_name,
            httponly=True,
            samesite="lax",
            secure=secure,
            path="/",
        )

    def from_request(self, request: Request) -> SessionPayload | None:
        """Verify the session cookie carried by a request, if any"""
        return self.verify(request.cookies.get(self.cookie_name))


@lru_cache
def get_session_manager() -> SessionManager:
    """Process-wide session manager built from settings"""
    settings = get_settings()
    return SessionManager(settings.secret_key, cookie_name=settings.session_cookie_name)
