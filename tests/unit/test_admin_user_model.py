"""
Unit tests for AdminUser and password hashing.
"""

from portal.models import AdminUser, normalize_email
from portal.services.passwords import burn_verification, hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_bcrypt(self):
        hashed = hash_password("admin123")
        assert hashed.startswith("$2")
        assert hashed != "admin123"

    def test_hashes_are_salted(self):
        assert hash_password("admin123") != hash_password("admin123")

    def test_verify(self):
        hashed = hash_password("admin123")
        assert verify_password("admin123", hashed) is True
        assert verify_password("admin124", hashed) is False

    def test_verify_rejects_empty_and_malformed(self):
        assert verify_password("", hash_password("x")) is False
        assert verify_password("admin123", None) is False
        assert verify_password("admin123", "not-a-bcrypt-hash") is False

    def test_burn_verification_returns_nothing(self):
        assert burn_verification("whatever") is None
        assert burn_verification("") is None


class TestAdminUserModel:
    def test_normalize_email(self):
        assert normalize_email("  Admin@Example.COM ") == "admin@example.com"
        assert normalize_email(None) == ""

    def test_create_normalizes_and_hashes(self):
        admin = AdminUser.create(tenant_id="acme", email=" Owner@Acme.TEST", password="s3cret!")
        assert admin.email == "owner@acme.test"
        assert admin.password_hash != "s3cret!"
        assert admin.verify_password("s3cret!") is True
        assert admin.verify_password("wrong") is False

    def test_set_password(self):
        admin = AdminUser.create(tenant_id="acme", email="a@acme.test", password="old-password")
        admin.set_password("new-password")
        assert admin.verify_password("new-password") is True
        assert admin.verify_password("old-password") is False

    def test_record_login(self):
        admin = AdminUser.create(tenant_id="acme", email="a@acme.test", password="pw")
        assert admin.last_login_at is None
        admin.record_login()
        assert admin.last_login_at is not None
