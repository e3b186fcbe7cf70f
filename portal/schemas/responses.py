### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Common Response Schemas -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Common Response Schemas

Pydantic models for standardized API responses. JSON keys follow the
front end's camelCase; Python attributes stay snake_case.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class PortalModel(BaseModel):
    """Base for schemas with camelCase aliases"""

    class Config:
        populate_by_name = True
        from_attributes = True


class OkResponse(BaseModel):
    """Acknowledgement for writes"""

    ok: bool = True


class ErrorResponse(BaseModel):
    """Standard error response"""

    error: str
    message: str
    details: Optional[Any] = None
    request_id: Optional[str] = None


class HealthResponse(BaseModel):
    """Health check response"""

    ok: bool = True
    ts: int = Field(description="Server time, milliseconds since epoch")


class BrandingResponse(PortalModel):
    """Branding document consumed by the front end"""

    tenant_id: str = Field(alias="tenantId")
    brand_name: str = Field(alias="brandName")
    primary_color: str = Field(alias="primaryColor")
    accent_color: str = Field(alias="accentColor")
    logo: str
    favicon: str
    labels: Dict[str, str] = Field(default_factory=dict)
    features: Dict[str, bool] = Field(default_factory=dict)
