### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Schemas Package -
# Author: Bailey Dixon
# Date: 09/05/2026
# Python: 3.11
####################

"""
Portal Schemas Package

Contains Pydantic models for request/response validation:
- auth: login, session and tenant switching
- ingest: tagged-union ingestion payloads
- portal: dashboard read responses
- secrets: tenant secrets update/view
- responses: common response schemas
"""

from .auth import LoginRequest, LoginResponse, MeResponse, TenantSummary
from .ingest import LogPayload, UsageIn, parse_log_payload
from .portal import EventOut, ErrorOut, MetricOut, MetricsSummary, PremiumResponse, UsageResponse
from .responses import BrandingResponse, ErrorResponse, HealthResponse, OkResponse
from .secrets import SecretsUpdate, SecretsView

__all__ = [
    "BrandingResponse",
    "ErrorOut",
    "ErrorResponse",
    "EventOut",
    "HealthResponse",
    "LogPayload",
    "LoginRequest",
    "LoginResponse",
    "MeResponse",
    "MetricOut",
    "MetricsSummary",
    "OkResponse",
    "PremiumResponse",
    "SecretsUpdate",
    "SecretsView",
    "TenantSummary",
    "UsageIn",
    "UsageResponse",
    "parse_log_payload",
]
