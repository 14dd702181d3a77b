"""Redirect configuration: per-country destinations, flags and page settings."""

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .common.validators import UrlSafetyValidator


DEFAULT_KEY = "DEFAULT"


class CounterConfig(BaseModel):
    """Visit counter namespace and per-country page titles."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    key: str = "norieldev"
    titles: Dict[str, str] = Field(default_factory=lambda: {DEFAULT_KEY: "NORIEL DEV NULL"})


class RedirectSettings(BaseModel):
    """Timing and detection toggles for the redirect page."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    instant_redirect_mode: bool = Field(default=False, alias="instantRedirectMode")
    min_wait_time: int = Field(default=1500, ge=0, alias="minWaitTime")
    max_wait_time: int = Field(default=3000, ge=0, alias="maxWaitTime")
    enable_logging: bool = Field(default=True, alias="enableLogging")
    enable_vpn_detection: bool = Field(default=True, alias="enableVPNDetection")
    vpn_detection_threshold: int = Field(default=60, ge=0, le=100, alias="vpnDetectionThreshold")


class RedirectConfig(BaseModel):
    """The redirect configuration document."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    redirects: Dict[str, str] = Field(default_factory=dict)
    flags: Dict[str, str] = Field(default_factory=dict)
    counter: CounterConfig = Field(default_factory=CounterConfig)
    settings: RedirectSettings = Field(default_factory=RedirectSettings)
    ad_scripts: List[str] = Field(default_factory=list, alias="adScripts")
    adult_domains: List[str] = Field(default_factory=list, alias="adultDomains")
    allowed_url_params: List[str] = Field(default_factory=list, alias="allowedUrlParams")

    def _first_safe(
        self,
        table: Dict[str, str],
        country: str,
        validator: UrlSafetyValidator,
        kind: str,
        logger: logging.Logger,
    ) -> Optional[str]:
        for key in (country, DEFAULT_KEY):
            candidate = table.get(key)
            if candidate is None:
                continue
            is_safe, error = validator.check(candidate)
            if is_safe:
                return candidate
            logger.warning(
                f"Skipping unsafe {kind} URL",
                extra={"payload": {"key": key, "url": candidate, "reason": error}},
            )
        return None

    def redirect_for(
        self,
        country: str,
        validator: UrlSafetyValidator,
        logger: Optional[logging.Logger] = None,
    ) -> Optional[str]:
        """Destination for a country, falling back to DEFAULT.

        Args:
            country: Alpha-2 code or the unknown sentinel
            validator: Screens every candidate before it is returned
            logger: Optional logger

        Returns:
            First safe destination, or None
        """
        logger = logger or logging.getLogger("geoip_api.config")
        return self._first_safe(self.redirects, country, validator, "redirect", logger)

    def flag_for(
        self,
        country: str,
        validator: UrlSafetyValidator,
        logger: Optional[logging.Logger] = None,
    ) -> Optional[str]:
        """Flag image for a country, falling back to DEFAULT."""
        logger = logger or logging.getLogger("geoip_api.config")
        return self._first_safe(self.flags, country, validator, "flag", logger)

    def title_for(self, country: str) -> Optional[str]:
        titles = self.counter.titles
        return titles.get(country) or titles.get(DEFAULT_KEY)


def default_redirect_config() -> RedirectConfig:
    """Configuration used when the configured source cannot be loaded."""
    return RedirectConfig(
        redirects={DEFAULT_KEY: "https://t.co/y5IrJWOLzN"},
        flags={DEFAULT_KEY: "https://flagcdn.com/w320/un.png"},
        counter=CounterConfig(),
        settings=RedirectSettings(),
        ad_scripts=[],
        adult_domains=[],
        allowed_url_params=["id", "page", "view"],
    )


async def _fetch_document(source: str, timeout: float) -> dict:
    if source.startswith(("http://", "https://")):
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            response = await client.get(source)
            response.raise_for_status()
            return response.json()

    with open(Path(source), "r", encoding="utf-8") as f:
        return json.load(f)


async def load_redirect_config(
    source: Optional[str],
    timeout: float = 5.0,
    logger: Optional[logging.Logger] = None,
) -> RedirectConfig:
    """Load the redirect configuration from a JSON file or URL.

    Any failure is logged and replaced by :func:`default_redirect_config`.

    Args:
        source: File path or http(s) URL
        timeout: Timeout in seconds for remote sources
        logger: Optional logger

    Returns:
        Loaded or default configuration
    """
    logger = logger or logging.getLogger("geoip_api.config")

    if not source:
        logger.warning("No redirect config source set, using defaults")
        return default_redirect_config()

    try:
        document = await _fetch_document(source, timeout)
        config = RedirectConfig.model_validate(document)
    except (OSError, ValueError, ValidationError, httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error(
            "Failed to load redirect config, using defaults",
            extra={"payload": {"source": source, "error": str(e)}},
        )
        return default_redirect_config()

    logger.info("Redirect config loaded", extra={"payload": {"source": source}})
    return config
