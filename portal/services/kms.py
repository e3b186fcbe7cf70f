### Description ###
# TenantPortal - Multi-Tenant Admin Portal
# - Envelope Encryption -
# Author: Bailey Dixon
# Date: 09/04/2026
# Python: 3.11
####################

"""
Envelope Encryption for Tenant Secrets

Tenant credentials (SMTP password, provider API key, OAuth client secret
and tokens) are stored as envelopes:

    kms:v1:<fernet token>:<hint>

- "v1" names the algorithm (Fernet, keyed by the master key), so rows
  written under a future scheme are recognisable.
- <hint> is the last 4 characters of the plaintext, present only when the
  plaintext is at least HINT_MIN_LENGTH long. It lets mask() show a suffix
  without decrypting.

The master key comes from PORTAL_KMS_MASTER_KEY. A valid Fernet key is used
directly; any other string is stretched with SHA-256.
"""

import base64
import hashlib
import json
from functools import lru_cache
from typing import Any

from cryptography.fernet import Fernet, InvalidToken

from portal.config import get_settings
from portal.errors import KmsError, KmsNotConfigured

ENVELOPE_PREFIX = "kms:"
CURRENT_VERSION = "v1"
MASK = "••••••••"
HINT_LENGTH = 4
HINT_MIN_LENGTH = 12


def _suffix_hint(plaintext: str) -> str:
    """Disclosable suffix for a plaintext (empty for short secrets)"""
    if len(plaintext) < HINT_MIN_LENGTH:
        return ""
    return plaintext[-HINT_LENGTH:]


def _is_valid_fernet_key(key: str) -> bool:
    try:
        Fernet(key.encode())
        return True
    except (ValueError, TypeError):
        return False


def derive_fernet_key(master_key: str) -> bytes:
    """Turn a configured master key into a Fernet key"""
    if _is_valid_fernet_key(master_key):
        return master_key.encode()
    digest = hashlib.sha256(master_key.encode()).digest()
    return base64.urlsafe_b64encode(digest)


def generate_master_key() -> str:
    """Generate a new random master key (Fernet format)"""
    return Fernet.generate_key().decode()


class EnvelopeCipher:
    """
    Encrypts, decrypts and masks secret fields.

    Fails closed: encrypt/decrypt raise KmsNotConfigured when no master
    key is set. mask() and is_encrypted() never need the key.
    """

    def __init__(self, master_key: str | None = None):
        master_key = (master_key or "").strip()
        self._fernet = Fernet(derive_fernet_key(master_key)) if master_key else None

    def has_key(self) -> bool:
        """Whether a master key is configured"""
        return self._fernet is not None

    @staticmethod
    def is_encrypted(value: Any) -> bool:
        """Whether a stored value is already an envelope"""
        return isinstance(value, str) and value.startswith(ENVELOPE_PREFIX)

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a secret into a versioned envelope.

        Args:
            plaintext: Non-empty secret value

        Returns:
            Envelope string safe to store

        Raises:
            KmsNotConfigured: If no master key is configured
            ValueError: If plaintext is empty
        """
        if self._fernet is None:
            raise KmsNotConfigured()
        if not plaintext:
            raise ValueError("Cannot encrypt an empty secret")

        token = self._fernet.encrypt(plaintext.encode()).decode()
        return f"{ENVELOPE_PREFIX}{CURRENT_VERSION}:{token}:{_suffix_hint(plaintext)}"

    def decrypt(self, envelope: str) -> str:
        """
        Decrypt an envelope produced by encrypt().

        Raises:
            KmsNotConfigured: If no master key is configured
            KmsError: On unknown version, malformed envelope or wrong key
        """
        if self._fernet is None:
            raise KmsNotConfigured()
        if not self.is_encrypted(envelope):
            raise KmsError("Value is not an encrypted envelope")

        parts = envelope.split(":", 3)
        if len(parts) != 4:
            raise KmsError("Malformed envelope")
        _, version, token, _hint = parts
        if version != CURRENT_VERSION:
            raise KmsError(f"Unsupported envelope version '{version}'")

        try:
            return self._fernet.decrypt(token.encode()).decode()
        except InvalidToken as e:
            raise KmsError("Envelope does not decrypt with the configured key") from e

    def encrypt_json(self, document: Any) -> str:
        """Encrypt a JSON document (OAuth token sets) or a ready string"""
        if isinstance(document, str):
            return self.encrypt(document)
        return self.encrypt(json.dumps(document, separators=(",", ":"), sort_keys=True))

    @classmethod
    def mask(cls, value: str | None) -> str | None:
        """
        Redacted display form of a stored secret.

        Always MASK followed by at most a 4 character suffix. Envelopes are
        masked from their hint; legacy plaintext uses the same suffix rule.
        """
        if not value:
            return None
        if cls.is_encrypted(value):
            parts = value.split(":", 3)
            hint = parts[3] if len(parts) == 4 else ""
            return MASK + hint[-HINT_LENGTH:]
        return MASK + _suffix_hint(value)


@lru_cache
def get_cipher() -> EnvelopeCipher:
    """Process-wide cipher built from settings"""
    return EnvelopeCipher(get_settings().kms_master_key)
