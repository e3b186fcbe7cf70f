### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Activity Models -
# Author: Bailey Dixon
# Date: 09/03/2026
# Python: 3.11
####################

"""
Activity Models

Append-only records reported by a tenant's bot or backend:
- Event: chat/system event lines
- ErrorRecord: reported errors
- Metric: typed samples (latency, success, ...)
- UsageRecord: model usage and cost, normalized on ingestion
- Lead: captured contact details

Every row is owned by exactly one tenant. Reads are always filtered by
tenant_id and ordered newest first.
"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Index, Integer, String, Text

from portal.database import Base


class Event(Base):
    """Chat or system event"""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False)
    role = Column(String(32), default="sys", nullable=False)  # user, bot, sys
    message = Column(Text, default="", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_events_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self):
        return f"<Event(id={self.id}, tenant='{self.tenant_id}', role='{self.role}')>"


class ErrorRecord(Base):
    """Error reported by a tenant integration"""

    __tablename__ = "errors"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False)
    user = Column(String(255), nullable=True)
    message = Column(Text, default="error", nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_errors_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self):
        return f"<ErrorRecord(id={self.id}, tenant='{self.tenant_id}')>"


class Metric(Base):
    """
    Metric sample.

    value is JSON so that numeric samples (latency=120) and structured
    samples share one table.
    """

    __tablename__ = "metrics"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False)
    type = Column(String(50), nullable=False)
    value = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        Index("ix_metrics_tenant_created", "tenant_id", "created_at"),
        Index("ix_metrics_tenant_type_created", "tenant_id", "type", "created_at"),
    )

    def __repr__(self):
        return f"<Metric(id={self.id}, tenant='{self.tenant_id}', type='{self.type}')>"


class UsageRecord(Base):
    """Model usage in the canonical shape produced by UsageIn"""

    __tablename__ = "usage_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False)
    model = Column(String(100), nullable=True)
    user = Column(String(255), nullable=True)
    prompt_tokens = Column(Integer, default=0, nullable=False)
    completion_tokens = Column(Integer, default=0, nullable=False)
    cached_tokens = Column(Integer, default=0, nullable=False)
    cost_usd = Column(Float, default=0.0, nullable=False)

    # Breakdown (USD)
    prompt_usd = Column(Float, default=0.0, nullable=False)
    completion_usd = Column(Float, default=0.0, nullable=False)
    cached_usd = Column(Float, default=0.0, nullable=False)
    total_usd = Column(Float, default=0.0, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_usage_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self):
        return f"<UsageRecord(id={self.id}, tenant='{self.tenant_id}', model='{self.model}')>"

    @property
    def tokens(self) -> int:
        return (self.prompt_tokens or 0) + (self.completion_tokens or 0)


class Lead(Base):
    """Lead captured by a tenant's bot"""

    __tablename__ = "leads"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    tags = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (Index("ix_leads_tenant_created", "tenant_id", "created_at"),)

    def __repr__(self):
        return f"<Lead(id={self.id}, tenant='{self.tenant_id}')>"

    @property
    def has_contact(self) -> bool:
        """Lead left an email or a phone number"""
        return bool(self.email or self.phone)
