"""
Password Hashing

One-way salted hashing of admin passwords with bcrypt.
"""

import bcrypt

# Checked when no account matches so that unknown emails cost the same
# bcrypt round as known ones.
_DUMMY_HASH = bcrypt.hashpw(b"portal-dummy-password", bcrypt.gensalt()).decode()


def hash_password(password: str) -> str:
    """Hash a password for storage"""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(password: str, hashed: str | None) -> bool:
    """Verify a plaintext password against a bcrypt hash"""
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Malformed hash in the store
        return False


def burn_verification(password: str) -> None:
    """Run one bcrypt check against a throwaway hash"""
    verify_password(password or "x", _DUMMY_HASH)
