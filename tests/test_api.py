"""Tests for API endpoints."""

import re

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from geo_redirect.service import GeoRedirectService
from web_app import create_app

TIMESTAMP_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z$")


def _client_for(service, config):
    app = create_app(service_instance=service, config=config)
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver")


@pytest.mark.asyncio
class TestCountryEndpoint:
    """Test /api/country."""

    async def test_get_country(self, client):
        """Test GET /api/country with a Vercel header."""
        response = await client.get("/api/country", headers={"x-vercel-ip-country": "us"})

        assert response.status_code == 200
        data = response.json()
        assert data["country"] == "US"
        assert TIMESTAMP_RE.match(data["timestamp"])
        assert "debug" not in data

    async def test_post_country(self, client):
        """Test POST is accepted like GET."""
        response = await client.post("/api/country", headers={"cf-ipcountry": "fr"})

        assert response.status_code == 200
        assert response.json()["country"] == "FR"

    async def test_undetected(self, client):
        response = await client.get("/api/country")

        assert response.status_code == 200
        assert response.json()["country"] == "XX"

    async def test_response_headers(self, client):
        """Test caching is disabled and sniffing blocked."""
        response = await client.get("/api/country")

        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"
        assert response.headers["pragma"] == "no-cache"
        assert response.headers["expires"] == "0"
        assert response.headers["x-content-type-options"] == "nosniff"
        assert response.headers["content-type"].startswith("application/json")

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE"])
    async def test_method_not_allowed(self, client, method):
        """Test methods other than GET/POST get a JSON 405."""
        response = await client.request(method, "/api/country", headers={"x-vercel-ip-country": "us"})

        assert response.status_code == 405
        assert response.headers["allow"] == "GET, POST"
        assert response.json() == {"error": "Method not allowed", "country": "XX"}

    async def test_debug_via_query(self, client):
        response = await client.get(
            "/api/country?debug=true",
            headers={"x-vercel-ip-country": "de", "x-forwarded-for": "1.2.3.4, 5.6.7.8"},
        )

        debug = response.json()["debug"]
        assert debug["detected"] == "DE"
        assert debug["clientIP"] == "1.2.3.4"
        assert debug["headers"]["x-vercel-ip-country"] == "de"
        assert debug["processingTime"].endswith("ms")

    async def test_debug_via_header(self, client):
        response = await client.get("/api/country", headers={"x-debug": "true"})

        assert response.json()["debug"]["detected"] == "XX"

    async def test_debug_in_development(self, redirect_config):
        config = Config(environment="development", redirect_config_source=None)
        service = GeoRedirectService(redirect_config=redirect_config, flags=config.runtime_flags())

        async with _client_for(service, config) as client:
            response = await client.get("/api/country", headers={"cf-ipcountry": "es"})

        assert response.json()["debug"]["detected"] == "ES"

    async def test_internal_error_hides_detail(self, service, config, monkeypatch):
        """Test an unexpected failure becomes a generic 500."""
        def broken(headers):
            raise RuntimeError("resolver exploded")

        monkeypatch.setattr(service, "detect_country", broken)

        async with _client_for(service, config) as client:
            response = await client.get("/api/country", headers={"x-vercel-ip-country": "us"})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "country": "XX",
            "message": "An error occurred",
        }

    async def test_internal_error_detail_in_development(self, redirect_config, monkeypatch):
        config = Config(environment="development", redirect_config_source=None)
        service = GeoRedirectService(redirect_config=redirect_config, flags=config.runtime_flags())

        def broken(headers):
            raise RuntimeError("resolver exploded")

        monkeypatch.setattr(service, "detect_country", broken)

        async with _client_for(service, config) as client:
            response = await client.get("/api/country")

        assert response.status_code == 500
        assert response.json()["message"] == "resolver exploded"
        assert response.json()["country"] == "XX"

    async def test_missing_service_returns_json_error(self, config):
        """Test a missing service still yields the JSON 500 body."""
        async with _client_for(None, config) as client:
            response = await client.get("/api/country")

        assert response.status_code == 500
        assert response.json() == {
            "error": "Internal server error",
            "country": "XX",
            "message": "An error occurred",
        }


@pytest.mark.asyncio
class TestRedirectEndpoints:
    """Test /api/redirect and /go."""

    async def test_destination(self, client):
        response = await client.get("/api/redirect?page=3", headers={"x-vercel-ip-country": "us"})

        assert response.status_code == 200
        data = response.json()
        assert data["country"] == "US"
        assert data["redirect_url"] == "https://example.com/us?page=3"
        assert data["flag_url"] == "https://flagcdn.com/w320/us.png"
        assert data["title"] == "Hello US"
        assert data["settings"]["maxWaitTime"] == 2000

    async def test_go_redirects(self, client):
        response = await client.get("/go?id=9&other=1", headers={"cf-ipcountry": "fr"})

        assert response.status_code == 302
        assert response.headers["location"] == "https://example.fr/landing?src=geo&id=9"
        assert response.headers["cache-control"] == "no-cache, no-store, must-revalidate"

    async def test_go_without_safe_destination(self, config):
        from geo_redirect.redirect_config import RedirectConfig

        service = GeoRedirectService(
            redirect_config=RedirectConfig(redirects={"DEFAULT": "javascript:alert(1)"}),
            flags=config.runtime_flags(),
        )

        async with _client_for(service, config) as client:
            response = await client.get("/go")

        assert response.status_code == 404
        assert response.headers["x-content-type-options"] == "nosniff"


@pytest.mark.asyncio
class TestHealth:
    """Test /api/health."""

    async def test_health_check(self, client):
        response = await client.get("/api/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "non-production"
        assert "timestamp" in data
