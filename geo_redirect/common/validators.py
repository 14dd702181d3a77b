"""Validation utilities for GeoIP redirects."""

import re
from typing import Any, Tuple

from pydantic import AnyUrl, TypeAdapter, ValidationError

from .runtime import Environment


COUNTRY_CODE_PATTERN = re.compile(r"[A-Z]{2}")

ALLOWED_SCHEMES = ("http", "https")

# Coarse string-prefix blocklist, not a CIDR match: "172.32.0.1" and
# "10.example.com" are rejected too.
BLOCKED_HOSTS = ("localhost", "127.0.0.1")
BLOCKED_HOST_PREFIXES = ("192.168.", "10.", "172.")

# WHATWG parsing: numeric hosts such as "2130706433" or "0x7f.0.0.1" come
# back as dotted IPv4, so the blocklist sees "127.0.0.1".
_URL_ADAPTER = TypeAdapter(AnyUrl)


def is_valid_country_code(code: Any) -> bool:
    """Check that a normalized value is an ISO 3166-1 alpha-2 shaped code.

    Args:
        code: Value after uppercasing and trimming

    Returns:
        True if the value is exactly two letters A-Z
    """
    if not code or not isinstance(code, str):
        return False

    if len(code) != 2:
        return False

    return COUNTRY_CODE_PATTERN.fullmatch(code) is not None


def check_redirect_url(
    url: Any,
    environment: Environment = Environment.NON_PRODUCTION,
) -> Tuple[bool, str]:
    """Validate a redirect destination.

    Args:
        url: Candidate destination
        environment: Deployment mode; private hosts are only rejected in production

    Returns:
        Tuple of (is_safe, error_message)
    """
    if not url or not isinstance(url, str) or url == "#":
        return False, "URL is required"

    try:
        parsed = _URL_ADAPTER.validate_python(url)
    except ValidationError as e:
        return False, f"Invalid URL format: {e.errors()[0]['msg']}"

    if parsed.scheme not in ALLOWED_SCHEMES:
        return False, "URL must use http or https protocol"

    if not parsed.host:
        return False, "URL must have a valid host"

    if environment is Environment.PRODUCTION:
        host = parsed.host.lower()
        if host in BLOCKED_HOSTS or host.startswith(BLOCKED_HOST_PREFIXES):
            return False, f"Host '{host}' is not allowed in production"

    return True, ""


def is_safe_url(url: Any, environment: Environment = Environment.NON_PRODUCTION) -> bool:
    """Return whether a URL is safe to redirect to."""
    is_safe, _ = check_redirect_url(url, environment)
    return is_safe


class UrlSafetyValidator:
    """URL validator bound to one deployment mode."""

    def __init__(self, environment: Environment = Environment.NON_PRODUCTION):
        self.environment = environment

    def check(self, url: Any) -> Tuple[bool, str]:
        return check_redirect_url(url, self.environment)

    def is_safe(self, url: Any) -> bool:
        return is_safe_url(url, self.environment)
