"""Security headers middleware."""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from typing import Callable

from geo_redirect.common.headers import get_client_ip


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Record the client address and add nosniff to every response."""

    async def dispatch(self, request: Request, call_next: Callable):
        """Process request and harden the response headers."""
        # Proxy-reported address, for logging only
        request.state.client_ip = get_client_ip(request.headers)

        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        return response
