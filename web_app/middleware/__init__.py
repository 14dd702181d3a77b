"""Middleware for the GeoIP web app."""

from .headers import SecurityHeadersMiddleware
from .logging import LoggingMiddleware

__all__ = ["SecurityHeadersMiddleware", "LoggingMiddleware"]
