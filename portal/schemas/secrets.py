### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Tenant Secrets Schemas -
# Author: Bailey Dixon
# Date: 09/06/2026
# Python: 3.11
####################

"""
Tenant Secrets Schemas

SecretsUpdate is a partial update: only fields present in the request
body are written. A secret field set to null is cleared; a string is
encrypted. SecretsView never carries secret material, only masks.
"""

from typing import Any, Dict, Optional, Union

from pydantic import Field

from portal.schemas.responses import PortalModel


class SecretsUpdate(PortalModel):
    """Partial update of a tenant's connection settings and secrets"""

    smtp_host: Optional[str] = Field(None, alias="smtpHost", max_length=255)
    smtp_port: Optional[int] = Field(None, alias="smtpPort", ge=1, le=65535)
    smtp_user: Optional[str] = Field(None, alias="smtpUser", max_length=255)
    google_client_id: Optional[str] = Field(None, alias="googleClientId", max_length=255)

    smtp_pass: Optional[str] = Field(None, alias="smtpPass", max_length=1024)
    openai_key: Optional[str] = Field(None, alias="openaiKey", max_length=1024)
    google_client_secret: Optional[str] = Field(None, alias="googleClientSecret", max_length=1024)
    google_tokens: Optional[Union[Dict[str, Any], str]] = Field(None, alias="googleTokens")


class SecretsView(PortalModel):
    """Tenant settings as shown in the browser"""

    tenant_id: str = Field(alias="tenantId")
    kms_configured: bool = Field(alias="kmsConfigured")

    smtp_host: Optional[str] = Field(None, alias="smtpHost")
    smtp_port: Optional[int] = Field(None, alias="smtpPort")
    smtp_user: Optional[str] = Field(None, alias="smtpUser")
    google_client_id: Optional[str] = Field(None, alias="googleClientId")

    smtp_pass: Optional[str] = Field(None, alias="smtpPass")
    openai_key: Optional[str] = Field(None, alias="openaiKey")
    google_client_secret: Optional[str] = Field(None, alias="googleClientSecret")
    google_tokens: Optional[str] = Field(None, alias="googleTokens")
