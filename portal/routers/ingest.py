### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Ingestion API Router -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
Ingestion Endpoints

Write side of the portal, called by tenant bots and services with either
an admin session or the shared ingest key (X-Customer-Key header or
?key=). The tenant comes from the session, or from the usual hints
(X-Tenant-ID, ?tenant=, subdomain) when a key is used.

- POST /api/portal/log - Tagged union body, "type" selects the record
- POST /api/portal/log-event?role= - {"message"}
- POST /api/portal/log-error?user= - {"message"}
- POST /api/portal/log-usage - usage object
- POST /api/portal/log-metric?type= - {"value"}
- POST /api/portal/log-conversation?sessionId= - conversation data
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import ValidationError

from portal.errors import ValidationFailed
from portal.middleware.auth import IngestContext, get_ingest_context
from portal.middleware.rate_limit import ingest_key_func, ingest_rate_limit, limiter
from portal.schemas.ingest import LOG_TYPES, parse_log_payload
from portal.schemas.portal import IngestResult
from portal.services.store import PortalStore, get_store
from portal.utils import get_logger

router = APIRouter()
logger = get_logger("portal.ingest")


def _validation_details(error: ValidationError) -> list:
    return [
        {"field": ".".join(str(loc) for loc in err["loc"]), "message": err["msg"]}
        for err in error.errors()
    ]


def _ingest(store: PortalStore, context: IngestContext, raw: Any) -> IngestResult:
    """Validate a raw payload and write it under the caller's tenant"""
    if isinstance(raw, dict) and raw.get("type") not in LOG_TYPES:
        logger.warning(f"[{context.tenant_id}] Unknown log type: {raw.get('type')!r}")
        raise ValidationFailed(
            f"Unknown log type; expected one of {', '.join(LOG_TYPES)}",
            details={"details": [{"field": "type", "message": "unknown log type"}]},
        )

    try:
        payload = parse_log_payload(raw)
    except ValidationError as e:
        logger.warning(f"[{context.tenant_id}] Rejected {raw.get('type') if isinstance(raw, dict) else '?'} payload")
        raise ValidationFailed(details={"details": _validation_details(e)}) from e

    written = store.record(context.tenant_id, payload)
    logger.debug(f"[{context.tenant_id}] Logged {written} via {context.via}")
    return IngestResult(type=written)


@router.post("/log", response_model=IngestResult, summary="Log a record")
@limiter.limit(ingest_rate_limit, key_func=ingest_key_func)
async def log_record(
    request: Request,
    body: Any = Body(...),
    context: IngestContext = Depends(get_ingest_context),
    store: PortalStore = Depends(get_store),
) -> IngestResult:
    """
    Log one record; the body's **type** is one of
    event, error, usage, metric, lead, conversation
    """
    return _ingest(store, context, body)


@router.post("/log-event", response_model=IngestResult, summary="Log an event")
@limiter.limit(ingest_rate_limit, key_func=ingest_key_func)
async def log_event(
    request: Request,
    role: Optional[str] = Query(None, description="Event role (default sys)"),
    body: Optional[Dict[str, Any]] = Body(None),
    context: IngestContext = Depends(get_ingest_context),
    store: PortalStore = Depends(get_store),
) -> IngestResult:
    body = body or {}
    return _ingest(store, context, {"type": "event", "role": role, "message": body.get("message")})


@router.post("/log-error", response_model=IngestResult, summary="Log an error")
@limiter.limit(ingest_rate_limit, key_func=ingest_key_func)
async def log_error(
    request: Request,
    user: Optional[str] = Query(None, description="User the error concerns"),
    body: Optional[Dict[str, Any]] = Body(None),
    context: IngestContext = Depends(get_ingest_context),
    store: PortalStore = Depends(get_store),
) -> IngestResult:
    body = body or {}
    return _ingest(store, context, {"type": "error", "user": user, "message": body.get("message")})


@router.post("/log-usage", response_model=IngestResult, summary="Log token usage")
@limiter.limit(ingest_rate_limit, key_func=ingest_key_func)
async def log_usage(
    request: Request,
    body: Optional[Dict[str, Any]] = Body(None),
    context: IngestContext = Depends(get_ingest_context),
    store: PortalStore = Depends(get_store),
) -> IngestResult:
    return _ingest(store, context, {"type": "usage", "usage": body or {}})


@router.post("/log-metric", response_model=IngestResult, summary="Log a metric sample")
@limiter.limit(ingest_rate_limit, key_func=ingest_key_func)
async def log_metric(
    request: Request,
    metric_type: str = Query(..., alias="type", description="Metric type, e.g. latency or success"),
    body: Optional[Dict[str, Any]] = Body(None),
    context: IngestContext = Depends(get_ingest_context),
    store: PortalStore = Depends(get_store),
) -> IngestResult:
    body = body or {}
    return _ingest(store, context, {"type": "metric", "metricType": metric_type, "value": body.get("value")})


@router.post("/log-conversation", response_model=IngestResult, summary="Log a conversation")
@limiter.limit(ingest_rate_limit, key_func=ingest_key_func)
async def log_conversation(
    request: Request,
    session_id: str = Query(..., alias="sessionId", description="Conversation session id"),
    body: Optional[Dict[str, Any]] = Body(None),
    context: IngestContext = Depends(get_ingest_context),
    store: PortalStore = Depends(get_store),
) -> IngestResult:
    return _ingest(store, context, {"type": "conversation", "sessionId": session_id, "data": body or {}})
