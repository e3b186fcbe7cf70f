"""
Integration tests for the tenant secrets router.

Tests GET/PUT /api/portal/tenant/secrets: masking, partial updates and
encryption at rest.
"""

from portal.services.kms import MASK

SECRETS_URL = "/api/portal/tenant/secrets"


class TestGetSecrets:
    def test_requires_session(self, client, default_tenant):
        assert client.get(SECRETS_URL).status_code == 401

    def test_view_without_kms(self, logged_in_client):
        body = logged_in_client.get(SECRETS_URL).json()
        assert body["tenantId"] == "default"
        assert body["kmsConfigured"] is False
        assert body["openaiKey"] is None

    def test_view_with_kms(self, kms_client, logged_in_client):
        assert logged_in_client.get(SECRETS_URL).json()["kmsConfigured"] is True


class TestUpdateSecrets:
    def test_requires_session(self, kms_client, default_tenant):
        assert kms_client.put(SECRETS_URL, json={"smtpHost": "mail.test"}).status_code == 401

    def test_kms_not_configured(self, logged_in_client, test_db, default_tenant):
        response = logged_in_client.put(SECRETS_URL, json={"openaiKey": "sk-test-abcdefghijkl"})
        assert response.status_code == 400
        assert response.json()["error"] == "kms_not_configured"

        test_db.refresh(default_tenant)
        assert default_tenant.openai_key is None

    def test_secrets_masked_and_encrypted(self, kms_client, logged_in_client, test_db, default_tenant, cipher):
        response = logged_in_client.put(
            SECRETS_URL,
            json={"openaiKey": "sk-test-abcdefghijkl", "smtpPass": "short", "smtpHost": "mail.example.com"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["openaiKey"] == MASK + "ijkl"
        assert body["smtpPass"] == MASK
        assert body["smtpHost"] == "mail.example.com"
        assert "sk-test" not in response.text

        test_db.refresh(default_tenant)
        assert default_tenant.openai_key.startswith("kms:v1:")
        assert default_tenant.smtp_pass.startswith("kms:v1:")
        assert cipher.decrypt(default_tenant.openai_key) == "sk-test-abcdefghijkl"

        # GET returns the same masks
        assert logged_in_client.get(SECRETS_URL).json()["openaiKey"] == MASK + "ijkl"

    def test_partial_update(self, kms_client, logged_in_client, test_db, default_tenant):
        logged_in_client.put(SECRETS_URL, json={"smtpHost": "mail.example.com", "openaiKey": "sk-test-abcdefghijkl"})
        body = logged_in_client.put(SECRETS_URL, json={"smtpPort": 587}).json()

        assert body["smtpPort"] == 587
        assert body["smtpHost"] == "mail.example.com"
        assert body["openaiKey"] == MASK + "ijkl"

    def test_null_clears(self, kms_client, logged_in_client):
        logged_in_client.put(SECRETS_URL, json={"openaiKey": "sk-test-abcdefghijkl"})
        body = logged_in_client.put(SECRETS_URL, json={"openaiKey": None}).json()
        assert body["openaiKey"] is None

    def test_google_tokens(self, kms_client, logged_in_client, test_db, default_tenant, cipher):
        tokens = {"access_token": "ya29.a0-access-token", "refresh_token": "1//refresh-token"}
        body = logged_in_client.put(SECRETS_URL, json={"googleTokens": tokens}).json()
        assert body["googleTokens"].startswith(MASK)
        assert "refresh" not in body["googleTokens"]

        test_db.refresh(default_tenant)
        assert default_tenant.google_tokens.startswith("kms:v1:")

    def test_invalid_port(self, kms_client, logged_in_client):
        response = logged_in_client.put(SECRETS_URL, json={"smtpPort": 70000})
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_scoped_to_session_tenant(self, kms_client, logged_in_client, test_db, other_tenant):
        logged_in_client.put(SECRETS_URL, json={"smtpHost": "mail.example.com"}, headers={"X-Tenant-ID": "beta"})
        test_db.refresh(other_tenant)
        assert other_tenant.smtp_host is None
