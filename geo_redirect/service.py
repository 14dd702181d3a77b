"""Business logic service for GeoIP redirects."""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from .country import CountryResolver, UNKNOWN_COUNTRY
from .redirect_config import RedirectConfig, default_redirect_config
from .common.headers import (
    HeaderMap,
    available_country_headers,
    filter_debug_headers,
    get_client_ip,
)
from .common.runtime import RuntimeFlags
from .common.url_builder import append_allowed_params
from .common.validators import UrlSafetyValidator


class GeoRedirectService:
    """Service layer for country detection and redirect selection."""

    def __init__(
        self,
        redirect_config: Optional[RedirectConfig] = None,
        resolver: Optional[CountryResolver] = None,
        flags: Optional[RuntimeFlags] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize GeoIP redirect service.

        Args:
            redirect_config: Redirect configuration (defaults when omitted)
            resolver: Optional country resolver
            flags: Runtime flags fixed at startup
            logger: Optional logger
        """
        self.logger = logger or logging.getLogger("geoip_api.service")
        self.redirect_config = redirect_config or default_redirect_config()
        self.resolver = resolver or CountryResolver(logger=self.logger)
        self.flags = flags or RuntimeFlags()
        self.validator = UrlSafetyValidator(self.flags.environment)

    def detect_country(self, headers: HeaderMap) -> Dict[str, Any]:
        """Detect the visitor country.

        Args:
            headers: Request headers

        Returns:
            Dictionary with country, header, source, client_ip, processing_ms
        """
        start_time = time.perf_counter()
        client_ip = get_client_ip(headers)

        match = self.resolver.detect(headers)
        country = match.country if match else UNKNOWN_COUNTRY

        processing_ms = int((time.perf_counter() - start_time) * 1000)

        if match:
            self.logger.info(
                "Country detected",
                extra={"payload": {
                    "country": country,
                    "header": match.header,
                    "ip": client_ip,
                    "processingTime": f"{processing_ms}ms",
                }},
            )
        else:
            self.logger.warning(
                "Could not detect country",
                extra={"payload": {
                    "ip": client_ip,
                    "processingTime": f"{processing_ms}ms",
                    "availableHeaders": available_country_headers(headers),
                }},
            )

        return {
            "country": country,
            "header": match.header if match else None,
            "source": match.source if match else None,
            "client_ip": client_ip,
            "processing_ms": processing_ms,
        }

    def build_debug_payload(self, headers: HeaderMap, detection: Dict[str, Any]) -> Dict[str, Any]:
        """Diagnostic block attached to the country response in debug mode."""
        return {
            "headers": filter_debug_headers(headers),
            "detected": detection["country"],
            "clientIP": detection["client_ip"],
            "processingTime": f"{detection['processing_ms']}ms",
        }

    def resolve_destination(
        self,
        country: str,
        params: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        """Pick the redirect destination and page assets for a country.

        Only URLs that pass the safety validator are returned; allowed
        request parameters are forwarded to the destination.

        Args:
            country: Detected country code
            params: Incoming query parameters

        Returns:
            Dictionary with country, redirect_url, flag_url, title, settings
        """
        config = self.redirect_config

        redirect_url = config.redirect_for(country, self.validator, self.logger)
        if redirect_url:
            redirect_url = append_allowed_params(redirect_url, params, config.allowed_url_params)
        else:
            self.logger.error(
                "No safe redirect destination configured",
                extra={"payload": {"country": country}},
            )

        return {
            "country": country,
            "redirect_url": redirect_url,
            "flag_url": config.flag_for(country, self.validator, self.logger),
            "title": config.title_for(country),
            "settings": config.settings.model_dump(by_alias=True),
        }
