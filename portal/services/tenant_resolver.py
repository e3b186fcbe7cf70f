### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Tenant Resolver -
# Author: Bailey Dixon
# Date: 09/04/2026
# Python: 3.11
####################

"""
Tenant Resolver

Determines the active tenant for a request. First match wins:

1. Tenant in a verified session token
2. Tenant hint cookie (set by POST /api/tenants/switch)
3. Tenant header (X-Tenant-ID)
4. Legacy ?tenant= query parameter
5. Hostname subdomain (reserved labels and numeric hosts skipped); the label
   is a Tenant.subdomain, mapped to the tenant id by PortalStore.tenant_id_for
6. The configured default tenant ("default")

Every hint is normalized to lower-case [a-z0-9_-]. A hint that is empty
after normalization is ignored and resolution moves on.
"""

import re
from dataclasses import dataclass
from typing import Iterable

from fastapi import Request

from portal.services.sessions import SessionPayload

_INVALID_CHARS = re.compile(r"[^a-z0-9_-]")

SOURCE_SESSION = "session"
SOURCE_COOKIE = "cookie"
SOURCE_HEADER = "header"
SOURCE_QUERY = "query"
SOURCE_SUBDOMAIN = "subdomain"
SOURCE_DEFAULT = "default"

# Sources that came from the client rather than a verified session
HINT_SOURCES = (SOURCE_COOKIE, SOURCE_HEADER, SOURCE_QUERY, SOURCE_SUBDOMAIN)


@dataclass(frozen=True)
class ResolvedTenant:
    """Result of tenant resolution"""

    tenant_id: str
    source: str

    @property
    def is_hint(self) -> bool:
        """True when the tenant was named by the client (not session or fallback)"""
        return self.source in HINT_SOURCES


def normalize_tenant(value: str | None) -> str | None:
    """Lower-case and strip a tenant hint; None if nothing usable remains"""
    if not value:
        return None
    cleaned = _INVALID_CHARS.sub("", value.strip().lower())
    return cleaned or None


def subdomain_from_host(host: str | None, reserved: Iterable[str]) -> str | None:
    """
    Extract a tenant label from a Host header value.

    acme.example.com -> acme, acme.localhost -> acme,
    example.com / localhost / 127.0.0.1 / www.example.com -> None
    """
    if not host:
        return None
    hostname = host.strip().lower()
    if hostname.startswith("["):
        return None  # IPv6 literal
    hostname = hostname.split(":", 1)[0].rstrip(".")
    labels = hostname.split(".")

    if len(labels) >= 3 or (len(labels) == 2 and labels[1] == "localhost"):
        label = labels[0]
    else:
        return None

    if not label or label.isdigit() or label in set(reserved):
        return None
    return normalize_tenant(label)


class TenantResolver:
    """Applies the resolution precedence to a request"""

    def __init__(
        self,
        default_tenant: str = "default",
        reserved_subdomains: Iterable[str] = ("www", "localhost", "admin"),
        cookie_name: str = "portal_tenant",
        header_name: str = "X-Tenant-ID",
    ):
        self.default_tenant = default_tenant
        self.reserved_subdomains = tuple(reserved_subdomains)
        self.cookie_name = cookie_name
        self.header_name = header_name

    def hint(self, request: Request) -> ResolvedTenant | None:
        """Client-supplied tenant hint (steps 2-5), if any"""
        candidates = (
            (SOURCE_COOKIE, request.cookies.get(self.cookie_name)),
            (SOURCE_HEADER, request.headers.get(self.header_name)),
            (SOURCE_QUERY, request.query_params.get("tenant")),
        )
        for source, raw in candidates:
            tenant_id = normalize_tenant(raw)
            if tenant_id:
                return ResolvedTenant(tenant_id, source)

        tenant_id = subdomain_from_host(request.headers.get("host"), self.reserved_subdomains)
        if tenant_id:
            return ResolvedTenant(tenant_id, SOURCE_SUBDOMAIN)
        return None

    def resolve(self, request: Request, session: SessionPayload | None = None) -> ResolvedTenant:
        """Resolve the active tenant for a request"""
        if session is not None:
            tenant_id = normalize_tenant(session.tenant_id)
            if tenant_id:
                return ResolvedTenant(tenant_id, SOURCE_SESSION)

        hint = self.hint(request)
        if hint is not None:
            return hint
        return ResolvedTenant(self.default_tenant, SOURCE_DEFAULT)


def get_tenant_resolver() -> TenantResolver:
    """Resolver configured from settings and config.yaml"""
    from portal.config import get_app_config, get_settings

    settings = get_settings()
    tenancy = get_app_config().tenancy
    return TenantResolver(
        default_tenant=tenancy.default_tenant,
        reserved_subdomains=tenancy.reserved_subdomains,
        cookie_name=settings.tenant_cookie_name,
        header_name=settings.tenant_header,
    )
