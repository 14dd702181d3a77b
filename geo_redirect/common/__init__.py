"""Common utilities for GeoIP redirects."""

from .validators import is_valid_country_code, is_safe_url, check_redirect_url, UrlSafetyValidator
from .headers import build_header_index, get_client_ip, is_debug_requested, NO_CACHE_HEADERS
from .url_builder import append_allowed_params
from .logging_config import setup_logging
from .runtime import Environment, RuntimeFlags

__all__ = [
    "is_valid_country_code",
    "is_safe_url",
    "check_redirect_url",
    "UrlSafetyValidator",
    "build_header_index",
    "get_client_ip",
    "is_debug_requested",
    "NO_CACHE_HEADERS",
    "append_allowed_params",
    "setup_logging",
    "Environment",
    "RuntimeFlags",
]
