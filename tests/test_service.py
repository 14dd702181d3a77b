"""Tests for the GeoIP redirect service."""

import logging

from geo_redirect.service import GeoRedirectService
from geo_redirect.redirect_config import default_redirect_config
from geo_redirect.common.runtime import Environment, RuntimeFlags


class TestDetectCountry:
    """Test country detection through the service."""

    def test_detected(self, service):
        headers = {"x-vercel-ip-country": "us", "x-forwarded-for": "1.2.3.4"}

        result = service.detect_country(headers)

        assert result["country"] == "US"
        assert result["header"] == "x-vercel-ip-country"
        assert result["source"] == "standard"
        assert result["client_ip"] == "1.2.3.4"
        assert result["processing_ms"] >= 0

    def test_not_detected_is_logged(self, service, caplog):
        """Test a miss is logged at warning with the available headers."""
        headers = {"x-vercel-id": "abc", "x-vercel-ip-country": "usa"}

        with caplog.at_level(logging.WARNING, logger="geoip_api"):
            result = service.detect_country(headers)

        assert result["country"] == "XX"
        assert result["header"] is None
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert warnings
        assert warnings[-1].payload["availableHeaders"] == ["x-vercel-id", "x-vercel-ip-country"]

    def test_debug_payload(self, service):
        headers = {
            "x-vercel-ip-country": "us",
            "x-real-ip": "8.8.8.8",
            "accept": "application/json",
        }
        detection = service.detect_country(headers)

        payload = service.build_debug_payload(headers, detection)

        assert payload["detected"] == "US"
        assert payload["clientIP"] == "8.8.8.8"
        assert payload["headers"] == {"x-vercel-ip-country": "us", "x-real-ip": "8.8.8.8"}
        assert payload["processingTime"].endswith("ms")


class TestResolveDestination:
    """Test redirect destination selection."""

    def test_country_destination_with_params(self, service):
        result = service.resolve_destination("FR", params={"id": "7", "utm_source": "x"})

        assert result["redirect_url"] == "https://example.fr/landing?src=geo&id=7"
        assert result["flag_url"] == "https://flagcdn.com/w320/un.png"
        assert result["title"] == "Welcome"
        assert result["settings"]["minWaitTime"] == 1000

    def test_unknown_country_uses_default(self, service):
        result = service.resolve_destination("XX")
        assert result["redirect_url"] == "https://example.com/default"

    def test_production_screens_private_hosts(self, redirect_config, logger):
        service = GeoRedirectService(
            redirect_config=redirect_config,
            flags=RuntimeFlags(environment=Environment.PRODUCTION),
            logger=logger,
        )
        assert service.resolve_destination("DE")["redirect_url"] == "https://example.com/default"

    def test_default_config_when_omitted(self):
        service = GeoRedirectService()
        assert service.redirect_config == default_redirect_config()
        assert service.resolve_destination("US")["redirect_url"] == "https://t.co/y5IrJWOLzN"
