### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Routers Package -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
Portal Routers Package

Contains endpoint routers:
- auth: login, logout, session and tenant switching
- portal: dashboard reads, branding and health
- ingest: write endpoints for bots and services
- secrets: tenant connection settings
- pages: HTML pages
"""

from .auth import router as auth_router
from .ingest import router as ingest_router
from .pages import router as pages_router
from .portal import router as portal_router
from .secrets import router as secrets_router

__all__ = ["auth_router", "ingest_router", "pages_router", "portal_router", "secrets_router"]
