"""Header parsing utilities for GeoIP redirects."""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Union


HeaderValue = Union[str, List[str], Tuple[str, ...]]
HeaderMap = Union[Mapping[str, HeaderValue], Iterable[Tuple[str, HeaderValue]]]
HeaderIndex = Dict[str, List[Any]]

# Tried in order when looking for the client address
CLIENT_IP_HEADERS = (
    "x-forwarded-for",
    "x-real-ip",
    "cf-connecting-ip",
    "x-client-ip",
    "x-forwarded",
    "forwarded-for",
    "forwarded",
)

DEBUG_HEADER_MARKERS = ("vercel", "country", "ip", "forwarded")
COUNTRY_HEADER_MARKERS = ("vercel", "country")

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
    "X-Content-Type-Options": "nosniff",
}


def header_items(headers: HeaderMap) -> List[Tuple[str, Any]]:
    """Flatten a header collection into (name, value) pairs.

    Starlette ``Headers.items()`` already yields one pair per raw header,
    so duplicated names survive.
    """
    if headers is None:
        return []
    if hasattr(headers, "items"):
        return list(headers.items())
    return list(headers)


def build_header_index(headers: HeaderMap) -> HeaderIndex:
    """Build a lowercase name -> values index, keeping iteration order.

    Args:
        headers: Request headers (mapping or list of pairs)

    Returns:
        Dictionary mapping lowercase header names to all their values
    """
    index: HeaderIndex = {}
    for name, value in header_items(headers):
        index.setdefault(str(name).lower(), []).append(value)
    return index


def first_header_value(value: Any) -> Any:
    """Return the first entry of a multi-valued header, or the value itself."""
    if isinstance(value, (list, tuple)):
        return value[0] if value else None
    return value


def get_client_ip(headers: HeaderMap) -> str:
    """Get the client IP from proxy headers.

    Only used for logging and the debug payload, never for geolocation.

    Args:
        headers: Request headers

    Returns:
        First address found, or 'unknown'
    """
    index = build_header_index(headers)

    for name in CLIENT_IP_HEADERS:
        for value in index.get(name, []):
            if not value:
                continue
            if isinstance(value, (list, tuple)):
                ip = str(value[0]).strip() if value else ""
            else:
                # x-forwarded-for may carry a chain, the client is first
                ip = str(value).split(",")[0].strip()
            if ip:
                return ip

    return "unknown"


def _names_with_markers(headers: HeaderMap, markers: Tuple[str, ...]) -> List[Tuple[str, Any]]:
    return [
        (name, value)
        for name, value in header_items(headers)
        if any(marker in str(name).lower() for marker in markers)
    ]


def filter_debug_headers(headers: HeaderMap) -> Dict[str, Any]:
    """Select the geolocation and addressing headers shown in debug output."""
    return {name: value for name, value in _names_with_markers(headers, DEBUG_HEADER_MARKERS)}


def available_country_headers(headers: HeaderMap) -> List[str]:
    """List header names that look like they could carry a country."""
    return [name for name, _ in _names_with_markers(headers, COUNTRY_HEADER_MARKERS)]


def is_debug_requested(
    headers: HeaderMap,
    query_params: Optional[Mapping[str, str]] = None,
) -> bool:
    """Check for ``x-debug: true`` or ``?debug=true``."""
    if query_params and query_params.get("debug") == "true":
        return True

    index = build_header_index(headers)
    return any(first_header_value(value) == "true" for value in index.get("x-debug", []))
