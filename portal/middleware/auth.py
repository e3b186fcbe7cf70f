### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Session Authentication Dependencies -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Session Authentication

FastAPI dependencies that turn a request into an authenticated context:

- get_session: verified session from the cookie, or None
- require_session: verified session, or 401 auth_required
- get_portal_context: session plus the tenant the request is scoped to
- get_ingest_context: session OR the shared ingest key, plus an existing
  tenant; used by the write endpoints called from other services
"""

import hmac
from dataclasses import dataclass

from fastapi import Depends, Request

from portal.config import get_settings
from portal.errors import AuthRequired, Unauthorized
from portal.services.sessions import SessionManager, SessionPayload, get_session_manager
from portal.services.store import PortalStore, get_store
from portal.services.tenant_resolver import TenantResolver, get_tenant_resolver

VIA_SESSION = "session"
VIA_KEY = "key"


@dataclass(frozen=True)
class PortalContext:
    """Authenticated admin and the tenant the request is scoped to"""

    session: SessionPayload
    tenant_id: str
    source: str

    @property
    def admin_user_id(self) -> int:
        return self.session.admin_user_id


@dataclass(frozen=True)
class IngestContext:
    """Caller of an ingestion endpoint and the tenant it writes to"""

    tenant_id: str
    via: str
    key_prefix: str | None = None


def get_session(
    request: Request,
    sessions: SessionManager = Depends(get_session_manager),
) -> SessionPayload | None:
    """Verified session for the request, or None"""
    return sessions.from_request(request)


def require_session(session: SessionPayload | None = Depends(get_session)) -> SessionPayload:
    """
    Verified session, or 401.

    Raises:
        AuthRequired: No cookie, or the token is expired/tampered
    """
    if session is None:
        raise AuthRequired()
    return session


def get_portal_context(
    request: Request,
    session: SessionPayload = Depends(require_session),
    resolver: TenantResolver = Depends(get_tenant_resolver),
) -> PortalContext:
    """
    Session plus resolved tenant for the portal read endpoints.

    The session's tenant always wins over client hints, so an admin only
    ever sees data of the tenant they logged in to.
    """
    resolved = resolver.resolve(request, session)
    context = PortalContext(session=session, tenant_id=resolved.tenant_id, source=resolved.source)
    request.state.portal_context = context
    request.state.tenant_id = context.tenant_id
    return context


def _provided_ingest_key(request: Request) -> str | None:
    settings = get_settings()
    return request.headers.get(settings.ingest_key_header) or request.query_params.get("key")


def get_ingest_context(
    request: Request,
    session: SessionPayload | None = Depends(get_session),
    resolver: TenantResolver = Depends(get_tenant_resolver),
    store: PortalStore = Depends(get_store),
) -> IngestContext:
    """
    Authenticate an ingestion request.

    A valid session writes to its own tenant. Otherwise the shared ingest
    key must be configured and match; the tenant then comes from the
    resolver hints (header, query, subdomain, default); a subdomain is
    matched against Tenant.subdomain.

    Raises:
        Unauthorized: No session and a missing, wrong or unconfigured key
        NotFound: The resolved tenant does not exist
    """
    if session is not None:
        context = IngestContext(tenant_id=resolver.resolve(request, session).tenant_id, via=VIA_SESSION)
    else:
        expected = get_settings().ingest_key
        provided = _provided_ingest_key(request)
        if not expected or not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
            raise Unauthorized()
        context = IngestContext(
            tenant_id=store.tenant_id_for(resolver.resolve(request)),
            via=VIA_KEY,
            key_prefix=provided[:8],
        )

    store.require_tenant(context.tenant_id)
    request.state.ingest_context = context
    request.state.tenant_id = context.tenant_id
    return context
