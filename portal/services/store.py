### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Store -
# Author: Bailey Dixon
# Date: 09/06/2026
# Python: 3.11
####################

"""
Portal Store

Tenant-scoped reads and writes over the app database. Every method takes
the tenant id explicitly and filters on it, so records written for one
tenant are never visible through another.

The store wraps a SQLAlchemy Session and is injected into handlers via
get_store(); tests swap the session through the get_db override.
"""

import math
from collections import Counter
from datetime import datetime, timedelta
from typing import Callable, Dict, Generator, List, Optional

from fastapi import Depends
from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session

from portal.database import get_db
from portal.errors import NotFound
from portal.models import (
    AdminUser,
    Conversation,
    ErrorRecord,
    Event,
    Lead,
    Metric,
    Tenant,
    UsageRecord,
    normalize_email,
)
from portal.schemas.ingest import (
    ConversationData,
    ConversationLog,
    ErrorLog,
    EventLog,
    LeadLog,
    MetricLog,
    UsageIn,
    UsageLog,
)
from portal.schemas.portal import (
    ConversationOut,
    CurrentUsageOut,
    ErrorOut,
    EventOut,
    LeadsByDay,
    MetricOut,
    MetricsSummary,
    PremiumResponse,
    UsageOut,
    UsageResponse,
)
from portal.services.tenant_resolver import SOURCE_SUBDOMAIN, ResolvedTenant

# Row caps for read endpoints (newest first)
EVENTS_LIMIT = 50
ERRORS_LIMIT = 100
METRICS_LOG_LIMIT = 100
USAGE_HISTORY_LIMIT = 100
CONVERSATIONS_LIMIT = 200
LATENCY_SAMPLE_LIMIT = 1000
LEAD_TAG_SCAN_LIMIT = 5000
TOP_TOPICS = 10
LEADS_BY_DAY_WINDOW = 7


def _js_round(value: float) -> int:
    """Round half up (dashboard figures match the front end's Math.round)"""
    return int(math.floor(value + 0.5))


def health_status(success_rate: float, avg_latency_ms: int) -> str:
    """ok / degraded / down from success rate and latency"""
    if success_rate >= 99 and avg_latency_ms < 250:
        return "ok"
    if success_rate >= 95:
        return "degraded"
    return "down"


class PortalStore:
    """Tenant-scoped data access"""

    def __init__(self, db: Session):
        self.db = db
        self._writers: Dict[str, Callable] = {
            "event": self._write_event,
            "error": self._write_error,
            "usage": self._write_usage,
            "metric": self._write_metric,
            "lead": self._write_lead,
            "conversation": self._write_conversation,
        }

    # ========================================
    # Tenants and admin users
    # ========================================

    def get_tenant(self, tenant_id: str) -> Optional[Tenant]:
        return self.db.query(Tenant).filter(Tenant.id == tenant_id).first()

    def get_tenant_by_subdomain(self, subdomain: str) -> Optional[Tenant]:
        return self.db.query(Tenant).filter(Tenant.subdomain == subdomain).first()

    def tenant_id_for(self, resolved: ResolvedTenant) -> str:
        """
        Tenant id for a resolver result.

        Hostname labels are matched against Tenant.subdomain; every other
        source already names a tenant id. An unmatched label is returned
        as-is and fails the usual tenant lookup.
        """
        if resolved.source == SOURCE_SUBDOMAIN:
            tenant = self.get_tenant_by_subdomain(resolved.tenant_id)
            if tenant is not None:
                return tenant.id
        return resolved.tenant_id

    def require_tenant(self, tenant_id: str) -> Tenant:
        """Active tenant by id, or NotFound"""
        tenant = self.get_tenant(tenant_id)
        if tenant is None or not tenant.is_active:
            raise NotFound(f"Unknown tenant '{tenant_id}'")
        return tenant

    def find_admins(self, email: str, tenant_id: Optional[str] = None) -> List[AdminUser]:
        """Admin accounts for an email, optionally limited to one tenant"""
        query = (
            self.db.query(AdminUser)
            .join(Tenant, Tenant.id == AdminUser.tenant_id)
            .filter(AdminUser.email == normalize_email(email), Tenant.is_active)
        )
        if tenant_id:
            query = query.filter(AdminUser.tenant_id == tenant_id)
        return query.order_by(AdminUser.tenant_id).all()

    def tenants_for_email(self, email: str) -> List[Tenant]:
        """Active tenants in which this email has an admin account"""
        return (
            self.db.query(Tenant)
            .join(AdminUser, AdminUser.tenant_id == Tenant.id)
            .filter(AdminUser.email == normalize_email(email), Tenant.is_active)
            .order_by(Tenant.name)
            .all()
        )

    # ========================================
    # Writes
    # ========================================

    def record(self, tenant_id: str, payload) -> str:
        """
        Persist an ingestion payload under a tenant.

        Args:
            tenant_id: Owning tenant (must exist)
            payload: One of the parsed LogPayload variants

        Returns:
            The payload type that was written
        """
        writer = self._writers[payload.type]
        writer(tenant_id, payload)
        self.db.commit()
        return payload.type

    def _write_event(self, tenant_id: str, payload: EventLog):
        self.db.add(Event(tenant_id=tenant_id, role=payload.role or "sys", message=payload.message or ""))

    def _write_error(self, tenant_id: str, payload: ErrorLog):
        self.db.add(ErrorRecord(tenant_id=tenant_id, user=payload.user, message=payload.message or "error"))

    def _write_usage(self, tenant_id: str, payload: UsageLog):
        usage: UsageIn = payload.usage
        self.db.add(
            UsageRecord(
                tenant_id=tenant_id,
                model=usage.model,
                user=usage.user,
                prompt_tokens=usage.prompt_tokens,
                completion_tokens=usage.completion_tokens,
                cached_tokens=usage.cached_tokens,
                cost_usd=usage.cost_usd,
                prompt_usd=usage.breakdown.prompt_usd,
                completion_usd=usage.breakdown.completion_usd,
                cached_usd=usage.breakdown.cached_usd,
                total_usd=usage.breakdown.total,
            )
        )

    def _write_metric(self, tenant_id: str, payload: MetricLog):
        self.db.add(Metric(tenant_id=tenant_id, type=payload.metric_type, value=payload.value))

    def _write_lead(self, tenant_id: str, payload: LeadLog):
        self.db.add(
            Lead(
                tenant_id=tenant_id,
                name=payload.name,
                email=payload.email,
                phone=payload.phone,
                tags=payload.tags,
            )
        )

    def _write_conversation(self, tenant_id: str, payload: ConversationLog):
        data: ConversationData = payload.data
        conversation = (
            self.db.query(Conversation)
            .filter(Conversation.tenant_id == tenant_id, Conversation.session_id == payload.session_id)
            .first()
        )
        if conversation is None:
            conversation = Conversation(tenant_id=tenant_id, session_id=payload.session_id)
            self.db.add(conversation)

        # A session's latest report replaces the previous one
        conversation.name = data.name
        conversation.email = data.email
        conversation.phone = data.phone
        conversation.snippet = data.display_snippet
        conversation.tags = data.tags
        conversation.updated_at = datetime.utcnow()

    # ========================================
    # Reads
    # ========================================

    def list_events(self, tenant_id: str, limit: int = EVENTS_LIMIT) -> List[EventOut]:
        rows = (
            self.db.query(Event)
            .filter(Event.tenant_id == tenant_id)
            .order_by(Event.created_at.desc(), Event.id.desc())
            .limit(limit)
            .all()
        )
        return [EventOut.from_row(row) for row in rows]

    def list_errors(self, tenant_id: str, limit: int = ERRORS_LIMIT) -> List[ErrorOut]:
        rows = (
            self.db.query(ErrorRecord)
            .filter(ErrorRecord.tenant_id == tenant_id)
            .order_by(ErrorRecord.created_at.desc(), ErrorRecord.id.desc())
            .limit(limit)
            .all()
        )
        return [ErrorOut.from_row(row) for row in rows]

    def list_metrics(self, tenant_id: str, limit: int = METRICS_LOG_LIMIT) -> List[MetricOut]:
        rows = (
            self.db.query(Metric)
            .filter(Metric.tenant_id == tenant_id)
            .order_by(Metric.created_at.desc(), Metric.id.desc())
            .limit(limit)
            .all()
        )
        return [MetricOut.from_row(row) for row in rows]

    def _usage_rows(self, tenant_id: str, limit: int) -> List[UsageRecord]:
        return (
            self.db.query(UsageRecord)
            .filter(UsageRecord.tenant_id == tenant_id)
            .order_by(UsageRecord.created_at.desc(), UsageRecord.id.desc())
            .limit(limit)
            .all()
        )

    def current_usage(self, tenant_id: str) -> CurrentUsageOut:
        rows = self._usage_rows(tenant_id, 1)
        if not rows:
            return CurrentUsageOut.empty()
        return CurrentUsageOut(**UsageOut.from_row(rows[0]).model_dump())

    def usage_overview(self, tenant_id: str, limit: int = USAGE_HISTORY_LIMIT) -> UsageResponse:
        rows = self._usage_rows(tenant_id, limit)
        history = [UsageOut.from_row(row) for row in rows]
        current = CurrentUsageOut(**history[0].model_dump()) if history else CurrentUsageOut.empty()
        return UsageResponse(current=current, history=history)

    def list_conversations(self, tenant_id: str, limit: int = CONVERSATIONS_LIMIT) -> List[ConversationOut]:
        rows = (
            self.db.query(Conversation)
            .filter(Conversation.tenant_id == tenant_id)
            .order_by(Conversation.updated_at.desc(), Conversation.id.desc())
            .limit(limit)
            .all()
        )
        return [ConversationOut.from_row(row) for row in rows]

    def _contact_count(self, model, tenant_id: str) -> int:
        """Rows of a lead-like table that carry an email or a phone"""
        has_email = and_(model.email.isnot(None), model.email != "")
        has_phone = and_(model.phone.isnot(None), model.phone != "")
        return (
            self.db.query(func.count(model.id))
            .filter(model.tenant_id == tenant_id, or_(has_email, has_phone))
            .scalar()
        ) or 0

    def premium_overview(self, tenant_id: str) -> PremiumResponse:
        """
        Lead funnel, conversation viewer and top topics.

        Every conversation session counts as a lead alongside explicit
        lead records; topics are the most frequent tags across both.
        """
        lead_count = self.db.query(func.count(Lead.id)).filter(Lead.tenant_id == tenant_id).scalar() or 0
        conversation_count = (
            self.db.query(func.count(Conversation.id)).filter(Conversation.tenant_id == tenant_id).scalar()
        ) or 0
        with_contact = self._contact_count(Lead, tenant_id) + self._contact_count(Conversation, tenant_id)

        tag_counts: Counter = Counter()
        for model in (Lead, Conversation):
            recent_tags = (
                self.db.query(model.tags)
                .filter(model.tenant_id == tenant_id)
                .order_by(model.created_at.desc())
                .limit(LEAD_TAG_SCAN_LIMIT)
                .all()
            )
            for (tags,) in recent_tags:
                tag_counts.update(str(tag) for tag in (tags or []))
        # Ties keep first-seen order
        topics = [tag for tag, _ in tag_counts.most_common(TOP_TOPICS)]

        return PremiumResponse(
            total_leads=lead_count + conversation_count,
            with_contact=with_contact,
            conversations=self.list_conversations(tenant_id),
            topics=topics,
        )

    def metrics_summary(self, tenant_id: str, started_at: datetime, now: Optional[datetime] = None) -> MetricsSummary:
        """
        Dashboard headline figures for today (UTC).

        requestsToday counts events, successRate is success metrics over
        requests (100 when idle), avgLatencyMs averages latency metrics.
        """
        now = now or datetime.utcnow()
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)

        requests_today = (
            self.db.query(func.count(Event.id))
            .filter(Event.tenant_id == tenant_id, Event.created_at >= day_start)
            .scalar()
        ) or 0
        successes_today = (
            self.db.query(func.count(Metric.id))
            .filter(Metric.tenant_id == tenant_id, Metric.type == "success", Metric.created_at >= day_start)
            .scalar()
        ) or 0

        latency_rows = (
            self.db.query(Metric.value)
            .filter(Metric.tenant_id == tenant_id, Metric.type == "latency", Metric.created_at >= day_start)
            .order_by(Metric.created_at.desc())
            .limit(LATENCY_SAMPLE_LIMIT)
            .all()
        )
        samples = [
            float(value) for (value,) in latency_rows
            if isinstance(value, (int, float)) and not isinstance(value, bool)
        ]

        success_rate = _js_round(successes_today / requests_today * 1000) / 10 if requests_today else 100.0
        avg_latency = _js_round(sum(samples) / len(samples)) if samples else 0

        return MetricsSummary(
            status=health_status(success_rate, avg_latency),
            uptime_sec=max(0, int((now - started_at).total_seconds())),
            requests_today=requests_today,
            success_rate=success_rate,
            avg_latency_ms=avg_latency,
            leads_by_day=self.leads_by_day(tenant_id, day_start),
            usage=self.current_usage(tenant_id),
        )

    def leads_by_day(self, tenant_id: str, day_start: datetime, days: int = LEADS_BY_DAY_WINDOW) -> List[LeadsByDay]:
        """Leads (and new conversation sessions) per day, oldest first, zero-filled"""
        window_start = day_start - timedelta(days=days - 1)
        counts: Counter = Counter()
        for model in (Lead, Conversation):
            rows = (
                self.db.query(model.created_at)
                .filter(model.tenant_id == tenant_id, model.created_at >= window_start)
                .all()
            )
            counts.update(created_at.date().isoformat() for (created_at,) in rows)
        return [
            LeadsByDay(date=day, count=counts.get(day, 0))
            for day in ((window_start + timedelta(days=i)).date().isoformat() for i in range(days))
        ]


def get_store(db: Session = Depends(get_db)) -> Generator[PortalStore, None, None]:
    """
    Dependency that provides a PortalStore bound to the request's session.

    Usage:
        @router.get("/endpoint")
        async def endpoint(store: PortalStore = Depends(get_store)):
            ...
    """
    yield PortalStore(db)
