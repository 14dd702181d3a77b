"""Pytest configuration and fixtures."""

import pytest
from httpx import ASGITransport, AsyncClient

from config import Config
from geo_redirect.redirect_config import RedirectConfig
from geo_redirect.service import GeoRedirectService
from geo_redirect.common.logging_config import setup_logging
from web_app import create_app


@pytest.fixture(autouse=True)
def reset_logging():
    """Give every test a fresh handler on the current stdout."""
    setup_logging(level="DEBUG")
    yield


@pytest.fixture
def logger():
    """Create test logger."""
    return setup_logging(level="DEBUG")


@pytest.fixture
def redirect_config():
    """Redirect config with a few country entries."""
    return RedirectConfig.model_validate({
        "redirects": {
            "DEFAULT": "https://example.com/default",
            "US": "https://example.com/us",
            "FR": "https://example.fr/landing?src=geo",
            "DE": "http://10.0.0.5/internal",
        },
        "flags": {
            "DEFAULT": "https://flagcdn.com/w320/un.png",
            "US": "https://flagcdn.com/w320/us.png",
        },
        "counter": {
            "key": "tests",
            "titles": {"DEFAULT": "Welcome", "US": "Hello US"},
        },
        "settings": {"minWaitTime": 1000, "maxWaitTime": 2000},
        "allowedUrlParams": ["id", "page"],
    })


@pytest.fixture
def config():
    """Non-production, non-development configuration."""
    return Config(environment="test", redirect_config_source=None)


@pytest.fixture
def service(redirect_config, config, logger):
    """Create service instance."""
    return GeoRedirectService(
        redirect_config=redirect_config,
        flags=config.runtime_flags(),
        logger=logger,
    )


@pytest.fixture
def app(service, config):
    """Create test FastAPI app."""
    return create_app(service_instance=service, config=config)


@pytest.fixture
async def client(app):
    """Create test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
