"""Core logic for the GeoIP redirect service."""

from .country import CountryResolver, CountryMatch, resolve_country, UNKNOWN_COUNTRY
from .redirect_config import RedirectConfig, default_redirect_config, load_redirect_config
from .service import GeoRedirectService

__all__ = [
    "CountryResolver",
    "CountryMatch",
    "resolve_country",
    "UNKNOWN_COUNTRY",
    "RedirectConfig",
    "default_redirect_config",
    "load_redirect_config",
    "GeoRedirectService",
]
