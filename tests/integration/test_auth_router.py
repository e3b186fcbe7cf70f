"""
Integration tests for the auth router.

Tests login, logout, session introspection, login rate limiting and
multi-tenant disambiguation at /api.
"""

import base64
import json
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from portal.services.sessions import SessionPayload, get_session_manager
from tests.fixtures import DEFAULT_EMAIL, DEFAULT_PASSWORD, create_admin_user, create_tenant


def login(client, email=DEFAULT_EMAIL, password=DEFAULT_PASSWORD, **extra):
    return client.post("/api/login", json={"email": email, "password": password, **extra})


class TestLogin:
    """Test POST /api/login endpoint."""

    def test_login_and_me(self, client, default_admin):
        """Valid credentials set a session that /api/me reads back."""
        response = login(client)
        assert response.status_code == 200
        assert response.json() == {"ok": True, "tenantId": "default"}

        set_cookie = response.headers.get("set-cookie", "").lower()
        assert "portal_session=" in set_cookie
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

        me = client.get("/api/me")
        assert me.status_code == 200
        assert me.json() == {"adminUserId": default_admin.id, "tenantId": "default", "email": DEFAULT_EMAIL}

    def test_email_is_case_insensitive(self, client, default_admin):
        assert login(client, email="  ADMIN@Example.com ").status_code == 200

    def test_records_last_login(self, client, test_db, default_admin):
        login(client)
        test_db.refresh(default_admin)
        assert default_admin.last_login_at is not None

    def test_wrong_password(self, client, default_admin):
        response = login(client, password="wrong")
        assert response.status_code == 401
        assert response.json()["error"] == "invalid_credentials"
        assert "portal_session" not in client.cookies

    def test_unknown_email_same_response(self, client, default_admin):
        """Unknown emails and wrong passwords are indistinguishable."""
        wrong_password = login(client, password="wrong").json()
        unknown_email = login(client, email="nobody@example.com").json()
        assert wrong_password == unknown_email

    def test_inactive_tenant_cannot_log_in(self, client, test_db, default_admin, default_tenant):
        default_tenant.is_active = False
        test_db.commit()
        assert login(client).status_code == 401

    def test_missing_fields(self, client):
        response = client.post("/api/login", json={"email": DEFAULT_EMAIL})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"


class TestSessionChecks:
    """Test GET /api/me with bad sessions."""

    def test_no_cookie(self, client):
        response = client.get("/api/me")
        assert response.status_code == 401
        assert response.json()["error"] == "auth_required"

    def test_tampered_cookie(self, client, default_admin, other_tenant):
        """Claims edited after signing must not verify."""
        token = get_session_manager().issue(
            SessionPayload(admin_user_id=default_admin.id, tenant_id="default", email=DEFAULT_EMAIL)
        )
        head, _body, signature = token.split(".")
        claims = jwt.decode(token, options={"verify_signature": False})
        claims["tid"] = "beta"
        forged_body = base64.urlsafe_b64encode(json.dumps(claims).encode()).rstrip(b"=").decode()

        client.cookies.set("portal_session", f"{head}.{forged_body}.{signature}")
        assert client.get("/api/me").status_code == 401

    def test_expired_cookie(self, client, default_admin):
        token = get_session_manager().issue(
            SessionPayload(admin_user_id=default_admin.id, tenant_id="default", email=DEFAULT_EMAIL),
            now=datetime.now(timezone.utc) - timedelta(days=8),
        )
        client.cookies.set("portal_session", token)
        assert client.get("/api/me").status_code == 401


class TestLogout:
    def test_logout_clears_cookie(self, logged_in_client):
        response = logged_in_client.post("/api/logout")
        assert response.status_code == 200
        assert response.json() == {"ok": True}
        assert logged_in_client.get("/api/me").status_code == 401

    def test_logout_clears_tenant_hint(self, logged_in_client, test_db, other_tenant):
        create_admin_user(test_db, other_tenant, email="beta.com", password="beta-password")
        assert logged_in_client.cookies.get("portal_tenant") == "default"

        logged_in_client.post("/api/logout")
        assert logged_in_client.cookies.get("portal_tenant") is None

        response = login(logged_in_client, email="beta.com", password="beta-password")
        assert response.status_code == 200
        assert response.json()["tenantId"] == "beta"


class TestLoginRateLimit:
    """Failed logins are counted per IP and per email."""

    def test_ip_lockout(self, client, default_admin):
        for i in range(20):
            assert login(client, email=f"user{i}@example.com", password="wrong").status_code == 401

        response = login(client, email="user99@example.com", password="wrong")
        assert response.status_code == 429
        assert response.json()["error"] == "too_many_attempts"
        assert int(response.headers["Retry-After"]) > 0

    def test_email_lockout(self, client, default_admin):
        for _ in range(5):
            assert login(client, password="wrong").status_code == 401

        # Even the right password is refused while locked out
        response = login(client)
        assert response.status_code == 429
        assert response.json()["error"] == "too_many_attempts"
        assert "Retry-After" in response.headers

    def test_successes_are_not_counted(self, client, default_admin):
        for _ in range(8):
            assert login(client).status_code == 200


class TestTenantDisambiguation:
    """One email with accounts in several tenants."""

    @pytest.fixture
    def shared_admin(self, test_db, default_admin, other_tenant):
        return create_admin_user(test_db, other_tenant, email=DEFAULT_EMAIL, password=DEFAULT_PASSWORD)

    def test_tenant_required(self, client, shared_admin):
        response = login(client)
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "tenant_required"
        assert sorted(body["tenants"]) == ["beta", "default"]
        assert "portal_session" not in client.cookies

    def test_tenant_in_body(self, client, shared_admin):
        response = login(client, tenantId="beta")
        assert response.status_code == 200
        assert response.json()["tenantId"] == "beta"
        assert client.get("/api/me").json()["tenantId"] == "beta"

    def test_tenant_header(self, client, shared_admin):
        response = client.post(
            "/api/login",
            json={"email": DEFAULT_EMAIL, "password": DEFAULT_PASSWORD},
            headers={"X-Tenant-ID": "default"},
        )
        assert response.status_code == 200
        assert response.json()["tenantId"] == "default"

    def test_password_differs_per_tenant(self, client, test_db, default_admin, other_tenant):
        """Only the account whose password matches counts."""
        create_admin_user(test_db, other_tenant, email=DEFAULT_EMAIL, password="beta-password")
        response = login(client, password="beta-password")
        assert response.status_code == 200
        assert response.json()["tenantId"] == "beta"

    def test_wrong_tenant_hint(self, client, default_admin, other_tenant):
        """A hint naming a tenant without this account fails like a bad password."""
        assert login(client, tenantId="beta").status_code == 401

    def test_stale_hint_cookie_is_ignored(self, client, test_db, default_tenant, other_tenant):
        """A hint naming a tenant without this account does not block the only match."""
        create_admin_user(test_db, other_tenant, email="beta@example.com", password="beta-password")
        client.cookies.set("portal_tenant", "default")

        response = login(client, email="beta@example.com", password="beta-password")
        assert response.status_code == 200
        assert response.json()["tenantId"] == "beta"

    def test_header_hint_without_account(self, client, default_admin, other_tenant):
        response = client.post(
            "/api/login",
            json={"email": DEFAULT_EMAIL, "password": DEFAULT_PASSWORD},
            headers={"X-Tenant-ID": "beta"},
        )
        assert response.status_code == 200
        assert response.json()["tenantId"] == "default"

    def test_subdomain_picks_tenant(self, client, test_db, default_admin):
        acme = create_tenant(test_db, tenant_id="acme-corp", name="Acme Corp", subdomain="acme")
        create_admin_user(test_db, acme, email=DEFAULT_EMAIL, password=DEFAULT_PASSWORD)

        response = client.post(
            "/api/login",
            json={"email": DEFAULT_EMAIL, "password": DEFAULT_PASSWORD},
            headers={"Host": "acme.example.com"},
        )
        assert response.status_code == 200
        assert response.json()["tenantId"] == "acme-corp"


class TestTenants:
    """Test GET /api/tenants and POST /api/tenants/switch."""

    @pytest.fixture
    def shared_admin(self, test_db, default_admin, other_tenant):
        return create_admin_user(test_db, other_tenant, email=DEFAULT_EMAIL, password="beta-password")

    def test_requires_session(self, client):
        assert client.get("/api/tenants").status_code == 401

    def test_lists_tenants(self, logged_in_client, shared_admin):
        response = logged_in_client.get("/api/tenants")
        assert response.status_code == 200
        tenants = {t["id"]: t for t in response.json()}
        assert set(tenants) == {"default", "beta"}
        assert tenants["default"]["current"] is True
        assert tenants["beta"]["current"] is False
        assert tenants["beta"]["plan"] == "premium"

    def test_switch_ends_session(self, logged_in_client, shared_admin):
        """Switching never hands out the other tenant's account without its password."""
        response = logged_in_client.post("/api/tenants/switch", json={"tenantId": "beta"})
        assert response.status_code == 200
        assert response.json() == {"ok": True, "tenantId": "beta"}

        assert logged_in_client.cookies.get("portal_tenant") == "beta"
        assert logged_in_client.get("/api/me").status_code == 401

    def test_switch_then_login_with_tenant_password(self, logged_in_client, shared_admin):
        logged_in_client.post("/api/tenants/switch", json={"tenantId": "beta"})

        # The hint points at beta, so the default account's password does not work there
        assert login(logged_in_client).status_code == 401

        response = login(logged_in_client, password="beta-password")
        assert response.status_code == 200
        assert response.json()["tenantId"] == "beta"

        me = logged_in_client.get("/api/me").json()
        assert me["tenantId"] == "beta"
        assert me["adminUserId"] == shared_admin.id

    def test_switch_to_foreign_tenant(self, logged_in_client, other_tenant):
        response = logged_in_client.post("/api/tenants/switch", json={"tenantId": "beta"})
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
        assert logged_in_client.get("/api/me").json()["tenantId"] == "default"
