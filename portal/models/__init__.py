### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Models Package -
# Author: Bailey Dixon
# Date: 09/02/2026
# Python: 3.11
####################

"""
Portal Models Package

Contains SQLAlchemy models for the application database:
- Tenant: Organization with branding and encrypted credentials
- AdminUser: Tenant administrator login
- Event, ErrorRecord, Metric, UsageRecord, Lead: Tenant activity records
- Conversation: Chat session summaries, one row per session
"""

from portal.models.tenant import Tenant, SECRET_FIELDS
from portal.models.admin_user import AdminUser, normalize_email
from portal.models.activity import Event, ErrorRecord, Metric, UsageRecord, Lead
from portal.models.conversation import Conversation

__all__ = [
    "Tenant",
    "AdminUser",
    "Event",
    "ErrorRecord",
    "Metric",
    "UsageRecord",
    "Lead",
    "Conversation",
    "SECRET_FIELDS",
    "normalize_email",
]
