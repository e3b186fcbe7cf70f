### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Read Schemas -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Portal Read Schemas

Response shapes for the dashboard's read endpoints. Each schema has a
from_row() constructor so database rows never leak extra columns.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from portal.schemas.responses import PortalModel


class EventOut(PortalModel):
    at: datetime
    role: str
    message: str

    @classmethod
    def from_row(cls, row) -> "EventOut":
        return cls(at=row.created_at, role=row.role, message=row.message)


class ErrorOut(PortalModel):
    at: datetime
    user: Optional[str] = None
    message: str

    @classmethod
    def from_row(cls, row) -> "ErrorOut":
        return cls(at=row.created_at, user=row.user, message=row.message)


class MetricOut(PortalModel):
    at: datetime
    type: str
    value: Any = None

    @classmethod
    def from_row(cls, row) -> "MetricOut":
        return cls(at=row.created_at, type=row.type, value=row.value)


class UsageBreakdownOut(PortalModel):
    prompt_usd: float = Field(0.0, alias="promptUSD")
    completion_usd: float = Field(0.0, alias="completionUSD")
    cached_usd: float = Field(0.0, alias="cachedUSD")
    total: float = 0.0


class UsageOut(PortalModel):
    at: Optional[datetime] = None
    model: Optional[str] = None
    user: Optional[str] = None
    prompt_tokens: int = 0
    completion_tokens: int = 0
    cached_tokens: int = 0
    tokens: int = 0
    cost_usd: float = Field(0.0, alias="costUSD")
    breakdown: Optional[UsageBreakdownOut] = None

    @classmethod
    def from_row(cls, row) -> "UsageOut":
        return cls(
            at=row.created_at,
            model=row.model,
            user=row.user,
            prompt_tokens=row.prompt_tokens,
            completion_tokens=row.completion_tokens,
            cached_tokens=row.cached_tokens,
            tokens=row.tokens,
            cost_usd=row.cost_usd,
            breakdown=UsageBreakdownOut(
                prompt_usd=row.prompt_usd,
                completion_usd=row.completion_usd,
                cached_usd=row.cached_usd,
                total=row.total_usd,
            ),
        )


class CurrentUsageOut(UsageOut):
    """Most recent usage record, labelled as the current period"""

    period: str = "Current"

    @classmethod
    def empty(cls) -> "CurrentUsageOut":
        return cls()


class UsageResponse(PortalModel):
    current: CurrentUsageOut
    history: List[UsageOut] = Field(default_factory=list)


class LeadsByDay(PortalModel):
    date: str
    count: int


class MetricsSummary(PortalModel):
    status: str
    uptime_sec: int = Field(alias="uptimeSec")
    requests_today: int = Field(alias="requestsToday")
    success_rate: float = Field(alias="successRate")
    avg_latency_ms: int = Field(alias="avgLatencyMs")
    leads_by_day: List[LeadsByDay] = Field(default_factory=list, alias="leadsByDay")
    usage: CurrentUsageOut


class ConversationOut(PortalModel):
    session_id: str = Field(alias="sessionId")
    name: str
    snippet: str
    at: datetime
    email: str = ""
    phone: str = ""
    tags: List[str] = Field(default_factory=list)

    @classmethod
    def from_row(cls, row) -> "ConversationOut":
        return cls(
            session_id=row.session_id,
            name=row.display_name,
            snippet=row.snippet or "",
            at=row.updated_at,
            email=row.email or "",
            phone=row.phone or "",
            tags=list(row.tags or []),
        )


class PremiumResponse(PortalModel):
    total_leads: int = Field(alias="totalLeads")
    with_contact: int = Field(alias="withContact")
    conversations: List[ConversationOut] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)


class IngestResult(BaseModel):
    ok: bool = True
    type: str
