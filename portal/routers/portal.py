### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Read API Router -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
Portal Read Endpoints

Dashboard data for the signed-in admin's tenant, most recent first:
- GET /api/portal/metrics - Headline figures for today
- GET /api/portal/events - Recent events
- GET /api/portal/errors - Recent errors
- GET /api/portal/metrics-log - Raw metric samples
- GET /api/portal/usage - Current usage and history
- GET /api/portal/conversations - Conversation sessions
- GET /api/portal/premium - Lead funnel and topics
- GET /api/portal/config - Tenant branding (no session needed)
- GET /api/portal/health - Liveness
"""

import time
from datetime import datetime
from typing import List

from fastapi import APIRouter, Depends, Request

from portal.config import get_app_config
from portal.middleware.auth import PortalContext, get_portal_context, get_session
from portal.middleware.rate_limit import api_key_func, api_rate_limit, limiter
from portal.schemas.portal import (
    ConversationOut,
    ErrorOut,
    EventOut,
    MetricOut,
    MetricsSummary,
    PremiumResponse,
    UsageResponse,
)
from portal.schemas.responses import BrandingResponse, HealthResponse
from portal.services.branding import build_branding
from portal.services.sessions import SessionPayload
from portal.services.store import PortalStore, get_store
from portal.services.tenant_resolver import TenantResolver, get_tenant_resolver

router = APIRouter()


@router.get("/metrics", response_model=MetricsSummary, summary="Dashboard summary")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_metrics(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> MetricsSummary:
    """
    Headline figures computed from today's records

    - **status**: ok / degraded / down
    - **requestsToday**: events logged today
    - **successRate**: success metrics per request, percent
    - **avgLatencyMs**: mean of today's latency samples
    - **leadsByDay**: leads per day over the last 7 days
    """
    started_at = getattr(request.app.state, "started_at", None) or datetime.utcnow()
    return store.metrics_summary(context.tenant_id, started_at)


@router.get("/events", response_model=List[EventOut], summary="Recent events")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_events(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> List[EventOut]:
    return store.list_events(context.tenant_id)


@router.get("/errors", response_model=List[ErrorOut], summary="Recent errors")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_errors(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> List[ErrorOut]:
    return store.list_errors(context.tenant_id)


@router.get("/metrics-log", response_model=List[MetricOut], summary="Raw metric samples")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_metrics_log(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> List[MetricOut]:
    return store.list_metrics(context.tenant_id)


@router.get("/usage", response_model=UsageResponse, summary="Usage and cost")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_usage(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> UsageResponse:
    return store.usage_overview(context.tenant_id)


@router.get("/conversations", response_model=List[ConversationOut], summary="Conversation sessions")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_conversations(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> List[ConversationOut]:
    return store.list_conversations(context.tenant_id)


@router.get("/premium", response_model=PremiumResponse, summary="Lead funnel and topics")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_premium(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
) -> PremiumResponse:
    return store.premium_overview(context.tenant_id)


@router.get("/config", response_model=BrandingResponse, summary="Tenant branding")
async def get_config(
    request: Request,
    session: SessionPayload | None = Depends(get_session),
    resolver: TenantResolver = Depends(get_tenant_resolver),
    store: PortalStore = Depends(get_store),
) -> BrandingResponse:
    """Branding for the resolved tenant; used by the login page, so no session is required"""
    resolved = resolver.resolve(request, session)
    tenant = store.require_tenant(store.tenant_id_for(resolved))
    request.state.tenant_id = tenant.id
    return build_branding(tenant, get_app_config().branding)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health() -> HealthResponse:
    return HealthResponse(ok=True, ts=int(time.time() * 1000))
