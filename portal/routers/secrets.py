### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Tenant Secrets API Router -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
Tenant Secrets Endpoints

- GET /api/portal/tenant/secrets - Connection settings with masked secrets
- PUT /api/portal/tenant/secrets - Partial update, secrets encrypted at rest
"""

from fastapi import APIRouter, Depends, Request

from portal.middleware.auth import PortalContext, get_portal_context
from portal.middleware.rate_limit import api_key_func, api_rate_limit, limiter
from portal.schemas.secrets import SecretsUpdate, SecretsView
from portal.services.kms import EnvelopeCipher, get_cipher
from portal.services.store import PortalStore, get_store
from portal.services.tenant_secrets import apply_secrets_update, secrets_view
from portal.utils import get_logger

router = APIRouter()
logger = get_logger("portal.secrets")


@router.get("/tenant/secrets", response_model=SecretsView, summary="Tenant settings")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def get_secrets(
    request: Request,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
    cipher: EnvelopeCipher = Depends(get_cipher),
) -> SecretsView:
    """Settings for the signed-in tenant; secret values are masked"""
    tenant = store.require_tenant(context.tenant_id)
    return secrets_view(tenant, cipher)


@router.put("/tenant/secrets", response_model=SecretsView, summary="Update tenant settings")
@limiter.limit(api_rate_limit, key_func=api_key_func)
async def update_secrets(
    request: Request,
    body: SecretsUpdate,
    context: PortalContext = Depends(get_portal_context),
    store: PortalStore = Depends(get_store),
    cipher: EnvelopeCipher = Depends(get_cipher),
) -> SecretsView:
    """
    Update tenant settings

    Only fields present in the body are written. Secrets are encrypted
    with the KMS master key; a null secret clears it. Answers 400
    kms_not_configured when no master key is set.
    """
    tenant = store.require_tenant(context.tenant_id)
    changed = apply_secrets_update(tenant, body, cipher)
    store.db.commit()

    logger.info(f"[{tenant.id}] {context.session.email} updated settings: {', '.join(changed) or 'nothing'}")
    return secrets_view(tenant, cipher)
