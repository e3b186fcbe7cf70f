### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Tenant Model -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

"""
Tenant Model

Represents an organization using the portal. Each tenant has its own
admin users, branding document and activity records.

Credential columns listed in SECRET_FIELDS only ever hold KMS envelopes
(see portal.services.kms); they are never returned to the browser.
"""

from datetime import datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import relationship

from portal.database import Base

# Columns stored encrypted at rest
SECRET_FIELDS = ("smtp_pass", "openai_key", "google_client_secret", "google_tokens")


class Tenant(Base):
    """
    Tenant model - represents an organization.

    The primary key is a slug (e.g. "default", "acme") so that it can be
    carried in cookies, headers and hostnames unchanged.
    """

    __tablename__ = "tenants"

    id = Column(String(64), primary_key=True)
    name = Column(String(100), nullable=False)
    subdomain = Column(String(64), nullable=False, unique=True)
    plan = Column(String(32), default="basic", nullable=False)
    branding = Column(JSON, default=dict, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Non-secret connection settings
    smtp_host = Column(String(255), nullable=True)
    smtp_port = Column(Integer, nullable=True)
    smtp_user = Column(String(255), nullable=True)
    google_client_id = Column(String(255), nullable=True)

    # Secrets (KMS envelopes)
    smtp_pass = Column(Text, nullable=True)
    openai_key = Column(Text, nullable=True)
    google_client_secret = Column(Text, nullable=True)
    google_tokens = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    admin_users = relationship("AdminUser", back_populates="tenant", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Tenant(id='{self.id}', name='{self.name}')>"
