### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Tenant Secrets Service -
# Author: Bailey Dixon
# Date: 09/07/2026
# Python: 3.11
####################

"""
Tenant Secrets Service

Reads and writes a tenant's connection settings. Secret columns only ever
receive envelopes from EnvelopeCipher, and only masks leave this module.
"""

import json
from typing import List

from sqlalchemy.orm import Session

from portal.errors import KmsNotConfigured
from portal.models import SECRET_FIELDS, Tenant
from portal.schemas.secrets import SecretsUpdate, SecretsView
from portal.services.kms import EnvelopeCipher

PLAIN_FIELDS = ("smtp_host", "smtp_port", "smtp_user", "google_client_id")


def secrets_view(tenant: Tenant, cipher: EnvelopeCipher) -> SecretsView:
    """Non-secret settings plus masked secrets"""
    values = {field: getattr(tenant, field) for field in PLAIN_FIELDS}
    values.update({field: EnvelopeCipher.mask(getattr(tenant, field)) for field in SECRET_FIELDS})
    return SecretsView(tenant_id=tenant.id, kms_configured=cipher.has_key(), **values)


def apply_secrets_update(tenant: Tenant, update: SecretsUpdate, cipher: EnvelopeCipher) -> List[str]:
    """
    Apply a partial update to a tenant.

    Only fields present in the request are touched. A secret set to null
    or "" is cleared; any other value is encrypted.

    Returns:
        Names of the fields that were written

    Raises:
        KmsNotConfigured: If no master key is configured
    """
    if not cipher.has_key():
        raise KmsNotConfigured()

    changed = []
    for field in update.model_fields_set:
        value = getattr(update, field)
        if field in SECRET_FIELDS:
            if value is None or value == "" or value == {}:
                setattr(tenant, field, None)
            elif field == "google_tokens":
                setattr(tenant, field, cipher.encrypt_json(value))
            else:
                setattr(tenant, field, cipher.encrypt(value))
        elif field in PLAIN_FIELDS:
            setattr(tenant, field, value)
        else:
            continue
        changed.append(field)

    return sorted(changed)


def encrypt_legacy_secrets(db: Session, cipher: EnvelopeCipher) -> int:
    """
    Encrypt secret columns still holding plaintext.

    Values that are already envelopes are skipped. Token documents stored
    as JSON text are normalized before encryption.

    Returns:
        Number of values encrypted
    """
    if not cipher.has_key():
        raise KmsNotConfigured()

    count = 0
    for tenant in db.query(Tenant).all():
        for field in SECRET_FIELDS:
            value = getattr(tenant, field)
            if not value or cipher.is_encrypted(value):
                continue
            if field == "google_tokens":
                try:
                    value = json.loads(value)
                except ValueError:
                    pass
                setattr(tenant, field, cipher.encrypt_json(value))
            else:
                setattr(tenant, field, cipher.encrypt(value))
            count += 1

    db.commit()
    return count
