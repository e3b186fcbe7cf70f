### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Auth API Router -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
Auth API Endpoints

Session login for tenant admins:
- POST /api/login - Verify credentials, set the session cookie
- POST /api/logout - Clear the session cookie
- GET /api/me - Current session
- GET /api/tenants - Tenants the signed-in email can administer
- POST /api/tenants/switch - Pick the tenant for the next sign-in
"""

from typing import List

from fastapi import APIRouter, Depends, Request, Response

from portal.config import get_settings
from portal.errors import InvalidCredentials, NotFound, TenantRequired
from portal.middleware.auth import require_session
from portal.middleware.rate_limit import client_ip, login_limiter
from portal.models import normalize_email
from portal.schemas.auth import (
    LoginRequest,
    LoginResponse,
    MeResponse,
    TenantSummary,
    TenantSwitchRequest,
    TenantSwitchResponse,
)
from portal.schemas.responses import OkResponse
from portal.services.passwords import burn_verification
from portal.services.sessions import SessionManager, SessionPayload, get_session_manager, request_is_secure
from portal.services.store import PortalStore, get_store
from portal.services.tenant_resolver import TenantResolver, get_tenant_resolver, normalize_tenant
from portal.utils import get_logger

router = APIRouter()
logger = get_logger("portal.auth")


def _set_tenant_cookie(response: Response, tenant_id: str, max_age: int, secure: bool) -> None:
    response.set_cookie(
        key=get_settings().tenant_cookie_name,
        value=tenant_id,
        max_age=max_age,
        httponly=True,
        samesite="lax",
        secure=secure,
        path="/",
    )


def _clear_tenant_cookie(response: Response, secure: bool) -> None:
    response.delete_cookie(
        key=get_settings().tenant_cookie_name,
        httponly=True,
        samesite="lax",
        secure=secure,
        path="/",
    )


def _start_session(
    request: Request,
    response: Response,
    sessions: SessionManager,
    admin_user_id: int,
    tenant_id: str,
    email: str,
) -> None:
    """Issue a session token and attach the session and tenant cookies"""
    secure = request_is_secure(request)
    token = sessions.issue(SessionPayload(admin_user_id=admin_user_id, tenant_id=tenant_id, email=email))
    sessions.set_cookie(response, token, secure=secure)
    _set_tenant_cookie(response, tenant_id, int(sessions.ttl.total_seconds()), secure)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Log in",
    description="Verify admin credentials and start a session",
)
async def login(
    request: Request,
    body: LoginRequest,
    response: Response,
    store: PortalStore = Depends(get_store),
    resolver: TenantResolver = Depends(get_tenant_resolver),
    sessions: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """
    Log in with email and password

    - **email**: Admin email (case-insensitive)
    - **password**: Admin password
    - **tenantId**: Optional tenant, required when the email administers
      several tenants and no tenant hint is present on the request
    """
    ip = client_ip(request)
    email = normalize_email(body.email)

    # Refused before credentials are looked at
    login_limiter.check(ip, email)

    explicit_tenant = normalize_tenant(body.tenant_id)
    tenant_hint = explicit_tenant
    if tenant_hint is None:
        hint = resolver.hint(request)
        tenant_hint = store.tenant_id_for(hint) if hint else None

    candidates = store.find_admins(email, tenant_hint)
    if not candidates and tenant_hint and explicit_tenant is None:
        # Request hints only narrow a multi-tenant match
        candidates = store.find_admins(email)
    if not candidates:
        burn_verification(body.password)
        matches = []
    else:
        matches = [user for user in candidates if user.verify_password(body.password)]

    if not matches:
        login_limiter.record_failure(ip, email)
        logger.warning(f"Login failed for {email} ip={ip} tenant={tenant_hint or '-'}")
        raise InvalidCredentials()

    if len(matches) > 1:
        tenant_ids = [user.tenant_id for user in matches]
        logger.info(f"Login for {email} needs a tenant choice: {', '.join(tenant_ids)}")
        raise TenantRequired(details={"tenants": tenant_ids})

    admin = matches[0]
    admin.record_login()
    store.db.commit()

    _start_session(request, response, sessions, admin.id, admin.tenant_id, admin.email)
    request.state.tenant_id = admin.tenant_id
    logger.info(f"Login succeeded for {admin.email} tenant={admin.tenant_id} ip={ip}")

    return LoginResponse(tenant_id=admin.tenant_id)


@router.post("/logout", response_model=OkResponse, summary="Log out")
async def logout(
    request: Request,
    response: Response,
    sessions: SessionManager = Depends(get_session_manager),
) -> OkResponse:
    """Clear the session and tenant cookies. Tokens are not revoked server-side."""
    secure = request_is_secure(request)
    sessions.clear_cookie(response, secure=secure)
    _clear_tenant_cookie(response, secure)
    return OkResponse()


@router.get("/me", response_model=MeResponse, summary="Current session")
async def me(session: SessionPayload = Depends(require_session)) -> MeResponse:
    return MeResponse(admin_user_id=session.admin_user_id, tenant_id=session.tenant_id, email=session.email)


@router.get("/tenants", response_model=List[TenantSummary], summary="Tenants for the signed-in admin")
async def list_tenants(
    session: SessionPayload = Depends(require_session),
    store: PortalStore = Depends(get_store),
) -> List[TenantSummary]:
    return [
        TenantSummary(
            id=tenant.id,
            name=tenant.name,
            subdomain=tenant.subdomain,
            plan=tenant.plan,
            current=tenant.id == session.tenant_id,
        )
        for tenant in store.tenants_for_email(session.email)
    ]


@router.post("/tenants/switch", response_model=TenantSwitchResponse, summary="Switch tenant")
async def switch_tenant(
    request: Request,
    body: TenantSwitchRequest,
    response: Response,
    session: SessionPayload = Depends(require_session),
    store: PortalStore = Depends(get_store),
    sessions: SessionManager = Depends(get_session_manager),
) -> TenantSwitchResponse:
    """
    Pick another tenant for the signed-in email

    Ends the current session and sets the tenant hint cookie. No session
    is issued for the target tenant: the next POST /api/login signs in to
    it with that tenant account's own password.

    The signed-in email must have an admin account in the target tenant;
    unknown tenants and tenants without such an account both answer 404.
    """
    tenant_id = normalize_tenant(body.tenant_id)
    admins = store.find_admins(session.email, tenant_id) if tenant_id else []
    if not admins:
        raise NotFound(f"Unknown tenant '{body.tenant_id}'")

    secure = request_is_secure(request)
    sessions.clear_cookie(response, secure=secure)
    _set_tenant_cookie(response, tenant_id, int(sessions.ttl.total_seconds()), secure)
    logger.info(f"{session.email} switching tenant {session.tenant_id} -> {tenant_id}, sign-in required")

    return TenantSwitchResponse(tenant_id=tenant_id)
