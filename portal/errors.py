### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Portal Errors -
# Author: Bailey Dixon
# Date: 09/03/2026
# Python: 3.11
####################

"""
Portal Errors

Every failure a handler can report maps to one PortalError subclass.
The exception handlers in portal.main turn them into

    {"error": "<code>", "message": "<text>"}

with the class's status code. Codes are stable; clients branch on them.
"""

from typing import Any, Dict, Optional


class PortalError(Exception):
    """Base class for errors surfaced to API clients"""

    status_code = 500
    code = "server_error"
    default_message = "Internal server error"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self) -> dict:
        body = {"error": self.code, "message": self.message}
        if self.details:
            body.update(self.details)
        return body


class AuthRequired(PortalError):
    """No session, or the session token did not verify"""

    status_code = 401
    code = "auth_required"
    default_message = "Authentication required"


class Unauthorized(PortalError):
    """Shared ingest key missing or wrong"""

    status_code = 401
    code = "bad_key"
    default_message = "Unauthorized"


class InvalidCredentials(PortalError):
    status_code = 401
    code = "invalid_credentials"
    default_message = "Invalid email or password"


class ValidationFailed(PortalError):
    status_code = 400
    code = "validation_error"
    default_message = "Request validation failed"


class TenantRequired(PortalError):
    """Credentials match accounts in more than one tenant"""

    status_code = 400
    code = "tenant_required"
    default_message = "This email belongs to several tenants; choose one"


class NotFound(PortalError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class RateLimited(PortalError):
    status_code = 429
    code = "rate_limited"
    default_message = "Too many requests, try again later"

    def __init__(self, message: Optional[str] = None, retry_after: int = 60, code: Optional[str] = None):
        super().__init__(message)
        self.retry_after = retry_after
        if code:
            self.code = code


class KmsNotConfigured(PortalError):
    """Secret write attempted without a master key"""

    status_code = 400
    code = "kms_not_configured"
    default_message = "Secret storage is not configured (missing KMS master key)"


class KmsError(PortalError):
    """Envelope could not be decrypted"""

    status_code = 500
    code = "server_error"
    default_message = "Could not decrypt secret"
