"""Country detection from edge-platform headers.

The visitor's country is never looked up from the IP address; it is read
from headers injected by the hosting edge (Vercel, with Cloudflare as a
fallback). Platforms are inconsistent about header letter-casing, so
detection runs an ordered chain of lookup strategies and takes the first
value that is structurally a valid alpha-2 code:

1. known Vercel header names, in a fixed order
2. any header whose name contains both "vercel" and "country"
3. the Cloudflare ``cf-ipcountry`` header

If nothing matches the sentinel ``XX`` is returned.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Sequence

from .common.headers import HeaderIndex, HeaderMap, build_header_index, first_header_value
from .common.validators import is_valid_country_code


UNKNOWN_COUNTRY = "XX"

VERCEL_COUNTRY_HEADERS = (
    "x-vercel-ip-country",
    "X-Vercel-Ip-Country",
    "X-VERCEL-IP-COUNTRY",
    "x-vercel-ipcountry",
    "X-Vercel-IPCountry",
)

CLOUDFLARE_COUNTRY_HEADER = "cf-ipcountry"


@dataclass(frozen=True)
class CountryMatch:
    """A detected country and where it came from."""

    country: str
    header: str
    source: str


Strategy = Callable[[HeaderIndex], Optional[CountryMatch]]


def normalize_country_code(value: Any) -> Optional[str]:
    """Coerce a raw header value to an uppercase, trimmed string.

    Multi-valued headers contribute their first value. Empty values give None.
    """
    value = first_header_value(value)
    if value is None or value == "":
        return None
    if isinstance(value, bytes):
        value = value.decode("latin-1")
    return str(value).upper().strip()


def _first_valid_code(index: HeaderIndex, name: str) -> Optional[str]:
    for value in index.get(name.lower(), []):
        code = normalize_country_code(value)
        if is_valid_country_code(code):
            return code
    return None


def match_vercel_headers(index: HeaderIndex) -> Optional[CountryMatch]:
    """Try the known Vercel header names in priority order."""
    tried = set()
    for name in VERCEL_COUNTRY_HEADERS:
        key = name.lower()
        if key in tried:
            continue
        tried.add(key)
        code = _first_valid_code(index, key)
        if code:
            return CountryMatch(country=code, header=name, source="standard")
    return None


def match_vercel_like_headers(index: HeaderIndex) -> Optional[CountryMatch]:
    """Scan any header mentioning both "vercel" and "country".

    Candidates are visited in lexicographic order so the result does not
    depend on the transport's header ordering.
    """
    for name in sorted(index):
        if "vercel" in name and "country" in name:
            code = _first_valid_code(index, name)
            if code:
                return CountryMatch(country=code, header=name, source="alternative")
    return None


def match_cloudflare_header(index: HeaderIndex) -> Optional[CountryMatch]:
    """Fall back to the Cloudflare country header."""
    code = _first_valid_code(index, CLOUDFLARE_COUNTRY_HEADER)
    if code:
        return CountryMatch(country=code, header=CLOUDFLARE_COUNTRY_HEADER, source="cloudflare")
    return None


DEFAULT_STRATEGIES: Sequence[Strategy] = (
    match_vercel_headers,
    match_vercel_like_headers,
    match_cloudflare_header,
)


class CountryResolver:
    """Resolve a visitor country from request headers."""

    def __init__(
        self,
        strategies: Optional[Iterable[Strategy]] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize resolver.

        Args:
            strategies: Ordered lookup strategies; the first match wins
            logger: Optional logger
        """
        self.strategies = tuple(strategies) if strategies is not None else tuple(DEFAULT_STRATEGIES)
        self.logger = logger or logging.getLogger("geoip_api.country")

    def detect(self, headers: HeaderMap) -> Optional[CountryMatch]:
        """Run the strategy chain.

        Args:
            headers: Request headers (any casing, possibly duplicated)

        Returns:
            The first valid match, or None if no strategy produced one
        """
        index = build_header_index(headers)

        for strategy in self.strategies:
            match = strategy(index)
            if match:
                self.logger.debug(
                    f"Country detected from {match.source} header",
                    extra={"payload": {"header": match.header, "country": match.country}},
                )
                return match
            self.logger.debug(f"No valid country from {strategy.__name__}")

        return None

    def resolve(self, headers: HeaderMap) -> str:
        """Return the visitor's alpha-2 country code, or ``XX``."""
        match = self.detect(headers)
        return match.country if match else UNKNOWN_COUNTRY


def resolve_country(headers: HeaderMap) -> str:
    """Resolve a country with the default strategy chain."""
    return CountryResolver().resolve(headers)
