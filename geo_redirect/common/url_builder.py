"""URL building utilities for GeoIP redirects."""

from typing import Iterable, Mapping, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit


def append_allowed_params(
    url: str,
    params: Optional[Mapping[str, str]] = None,
    allowed: Optional[Iterable[str]] = None,
) -> str:
    """Forward whitelisted query parameters to a redirect destination.

    Args:
        url: Destination URL (already screened)
        params: Incoming request query parameters
        allowed: Parameter names that may be forwarded

    Returns:
        URL with the allowed parameters appended to its own query
    """
    if not params or not allowed:
        return url

    allowed_names = set(allowed)
    forwarded = [(k, v) for k, v in params.items() if k in allowed_names]
    if not forwarded:
        return url

    parts = urlsplit(url)
    query = urlencode(forwarded)
    if parts.query:
        query = f"{parts.query}&{query}"

    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))
