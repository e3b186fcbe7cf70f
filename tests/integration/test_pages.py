"""
Integration tests for HTML pages, static assets and app-wide behaviour.
"""


class TestPages:
    def test_root_redirects(self, client):
        response = client.get("/", follow_redirects=False)
        assert response.status_code == 302
        assert response.headers["location"] == "/portal"

    def test_portal_page(self, client):
        response = client.get("/portal")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")
        assert "/static/app.js" in response.text

    def test_pricing_page(self, client):
        response = client.get("/pricing")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/html")

    def test_static_asset(self, client):
        response = client.get("/static/portal.css")
        assert response.status_code == 200

    def test_default_brand_logo(self, client):
        assert client.get("/static/brands/default/logo.svg").status_code == 200


class TestAppBehaviour:
    def test_request_id_header(self, client):
        response = client.get("/api/portal/health")
        assert len(response.headers["X-Request-ID"]) == 8

    def test_unknown_route_is_json(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_method_not_allowed(self, client):
        response = client.delete("/api/portal/health")
        assert response.status_code == 405
        assert response.json()["error"] == "method_not_allowed"

    def test_openapi_docs(self, client):
        assert client.get("/api/openapi.json").status_code == 200
