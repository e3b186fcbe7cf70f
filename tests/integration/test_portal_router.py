"""
Integration tests for the portal read router.

Tests the dashboard endpoints at /api/portal: session checks, tenant
scoping, ordering and row caps.
"""

from datetime import datetime, timedelta

import pytest

from tests.fixtures import create_tenant
from tests.fixtures.factories import create_conversation, create_event, create_lead

READ_ENDPOINTS = [
    "/api/portal/metrics",
    "/api/portal/events",
    "/api/portal/errors",
    "/api/portal/metrics-log",
    "/api/portal/usage",
    "/api/portal/conversations",
    "/api/portal/premium",
]


class TestSessionRequired:
    @pytest.mark.parametrize("path", READ_ENDPOINTS)
    def test_anonymous_is_rejected(self, client, default_tenant, path):
        response = client.get(path)
        assert response.status_code == 401
        assert response.json()["error"] == "auth_required"

    @pytest.mark.parametrize("path", READ_ENDPOINTS)
    def test_ingest_key_is_not_a_session(self, client, default_tenant, ingest_headers, path):
        """The shared ingest key only grants writes."""
        assert client.get(path, headers=ingest_headers).status_code == 401

    @pytest.mark.parametrize("path", READ_ENDPOINTS)
    def test_signed_in(self, logged_in_client, path):
        assert logged_in_client.get(path).status_code == 200


class TestMetricsLog:
    def test_logged_metric_comes_first(self, logged_in_client):
        """A metric written through /log is the newest metrics-log entry."""
        logged_in_client.post("/api/portal/log", json={"type": "metric", "metricType": "success", "value": 1})
        response = logged_in_client.post("/api/portal/log", json={"type": "metric", "metricType": "latency", "value": 120})
        assert response.status_code == 200

        entries = logged_in_client.get("/api/portal/metrics-log").json()
        assert entries[0]["type"] == "latency"
        assert entries[0]["value"] == 120
        assert "at" in entries[0]


class TestEvents:
    def test_capped_newest_first(self, logged_in_client, test_db, default_tenant):
        start = datetime.utcnow() - timedelta(hours=1)
        for i in range(60):
            create_event(test_db, default_tenant, message=f"m{i}", created_at=start + timedelta(seconds=i))

        events = logged_in_client.get("/api/portal/events").json()
        assert len(events) == 50
        assert events[0]["message"] == "m59"
        assert events[-1]["message"] == "m10"

    def test_tenant_isolation(self, logged_in_client, test_db, other_tenant, default_tenant):
        create_event(test_db, other_tenant, message="beta secret")
        create_event(test_db, default_tenant, message="default event")

        messages = [e["message"] for e in logged_in_client.get("/api/portal/events").json()]
        assert messages == ["default event"]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"params": {"tenant": "beta"}},
            {"headers": {"X-Tenant-ID": "beta"}},
            {"headers": {"Host": "beta.example.com"}},
        ],
    )
    def test_session_tenant_beats_hints(self, logged_in_client, test_db, other_tenant, kwargs):
        """Client hints never widen a session to another tenant."""
        create_event(test_db, other_tenant, message="beta secret")
        events = logged_in_client.get("/api/portal/events", **kwargs).json()
        assert all(e["message"] != "beta secret" for e in events)


class TestMetricsSummary:
    def test_shape(self, logged_in_client):
        body = logged_in_client.get("/api/portal/metrics").json()
        assert set(body) >= {
            "status", "uptimeSec", "requestsToday", "successRate", "avgLatencyMs", "leadsByDay", "usage",
        }
        assert body["status"] == "ok"
        assert body["successRate"] == 100.0
        assert len(body["leadsByDay"]) == 7
        assert body["usage"]["period"] == "Current"

    def test_counts_todays_events(self, logged_in_client, ingest_headers):
        for _ in range(4):
            logged_in_client.post("/api/portal/log", json={"type": "event", "message": "q"}, headers=ingest_headers)
        for _ in range(3):
            logged_in_client.post(
                "/api/portal/log", json={"type": "metric", "metricType": "success"}, headers=ingest_headers
            )

        body = logged_in_client.get("/api/portal/metrics").json()
        assert body["requestsToday"] == 4
        assert body["successRate"] == 75.0
        assert body["status"] == "down"


class TestUsage:
    def test_current_and_history(self, logged_in_client):
        logged_in_client.post("/api/portal/log-usage", json={"model": "a", "costUSD": 0.1})
        logged_in_client.post("/api/portal/log-usage", json={"model": "b", "cost": 0.2})

        body = logged_in_client.get("/api/portal/usage").json()
        assert body["current"]["model"] == "b"
        assert body["current"]["costUSD"] == 0.2
        assert [row["model"] for row in body["history"]] == ["b", "a"]

    def test_empty(self, logged_in_client):
        body = logged_in_client.get("/api/portal/usage").json()
        assert body["current"]["costUSD"] == 0.0
        assert body["history"] == []


class TestPremium:
    def test_funnel(self, logged_in_client, test_db, default_tenant):
        create_lead(test_db, default_tenant, email="a@example.com", tags=["pricing"])
        create_lead(test_db, default_tenant, tags=["pricing", "demo"])
        create_conversation(test_db, default_tenant, "s1", phone="555-0100", snippet="hello", tags=["demo"])

        body = logged_in_client.get("/api/portal/premium").json()
        assert body["totalLeads"] == 3
        assert body["withContact"] == 2
        assert set(body["topics"]) == {"pricing", "demo"}
        assert body["conversations"][0]["sessionId"] == "s1"
        assert body["conversations"][0]["snippet"] == "hello"


class TestConfigAndHealth:
    def test_config_without_session(self, client, default_tenant):
        body = client.get("/api/portal/config").json()
        assert body["tenantId"] == "default"
        assert body["brandName"] == "Default Tenant"
        assert body["logo"].startswith("/static/brands/")

    def test_config_for_hinted_tenant(self, client, test_db):
        create_tenant(test_db, tenant_id="acme", name="Acme", branding={"primaryColor": "#111111"})
        body = client.get("/api/portal/config", headers={"X-Tenant-ID": "acme"}).json()
        assert body["tenantId"] == "acme"
        assert body["primaryColor"] == "#111111"

    def test_config_by_subdomain(self, client, test_db, default_tenant):
        """The hostname label is matched against the tenant's subdomain, not its id."""
        create_tenant(test_db, tenant_id="acme-corp", name="Acme Corp", subdomain="acme")
        response = client.get("/api/portal/config", headers={"Host": "acme.example.com"})
        assert response.status_code == 200
        assert response.json()["tenantId"] == "acme-corp"
        assert response.json()["brandName"] == "Acme Corp"

    def test_config_unknown_subdomain(self, client, default_tenant):
        response = client.get("/api/portal/config", headers={"Host": "ghost.example.com"})
        assert response.status_code == 404

    def test_config_unknown_tenant(self, client, default_tenant):
        response = client.get("/api/portal/config", params={"tenant": "ghost"})
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_health(self, client):
        body = client.get("/api/portal/health").json()
        assert body["ok"] is True
        assert body["ts"] > 1_600_000_000_000
