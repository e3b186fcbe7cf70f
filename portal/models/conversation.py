### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Conversation Model -
# Author: Bailey Dixon
# Date: 09/03/2026
# Python: 3.11
####################

"""
Conversation Model

One row per chat session. Ingesting a conversation with an existing
session_id updates that row instead of appending a new one.
"""

from datetime import datetime

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint

from portal.database import Base


class Conversation(Base):
    """Conversation summary for the conversation viewer"""

    __tablename__ = "conversations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    tenant_id = Column(String(64), ForeignKey("tenants.id"), nullable=False)
    session_id = Column(String(128), nullable=False)
    name = Column(String(255), nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    snippet = Column(Text, default="", nullable=False)
    tags = Column(JSON, default=list, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "session_id", name="uq_conversations_tenant_session"),
        Index("ix_conversations_tenant_updated", "tenant_id", "updated_at"),
    )

    def __repr__(self):
        return f"<Conversation(id={self.id}, tenant='{self.tenant_id}', session='{self.session_id}')>"

    @property
    def display_name(self) -> str:
        return self.name or self.email or "Unknown"
