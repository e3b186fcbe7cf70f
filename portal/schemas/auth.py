### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Auth Schemas -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Auth Schemas

Pydantic models for login, session introspection and tenant switching.
"""

from typing import Optional

from pydantic import Field

from portal.schemas.responses import PortalModel


class LoginRequest(PortalModel):
    """Login request body"""

    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1, max_length=1024)
    tenant_id: Optional[str] = Field(None, alias="tenantId", max_length=64)


class LoginResponse(PortalModel):
    ok: bool = True
    tenant_id: str = Field(alias="tenantId")


class MeResponse(PortalModel):
    admin_user_id: int = Field(alias="adminUserId")
    tenant_id: str = Field(alias="tenantId")
    email: str


class TenantSummary(PortalModel):
    id: str
    name: str
    subdomain: str
    plan: str
    current: bool = False


class TenantSwitchRequest(PortalModel):
    tenant_id: str = Field(..., alias="tenantId", min_length=1, max_length=64)


class TenantSwitchResponse(PortalModel):
    ok: bool = True
    tenant_id: str = Field(alias="tenantId")
