"""
Test fixtures and factories for Tenant Portal tests.
"""

from tests.fixtures.data import (
    CONVERSATION,
    DEFAULT_EMAIL,
    DEFAULT_PASSWORD,
    USAGE_PORTAL_STYLE,
    USAGE_SDK_STYLE,
)
from tests.fixtures.factories import build_request, create_admin_user, create_tenant

__all__ = [
    "CONVERSATION",
    "DEFAULT_EMAIL",
    "DEFAULT_PASSWORD",
    "USAGE_PORTAL_STYLE",
    "USAGE_SDK_STYLE",
    "build_request",
    "create_admin_user",
    "create_tenant",
]
