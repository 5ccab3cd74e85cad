# Ensure tests import the package from this checkout first, even when an
# older copy of cors_gateway is installed in the environment.
import os
import sys

import httpx
import pytest

SERVICE_ROOT = os.path.dirname(__file__)
if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from cors_gateway.config import GatewayConfig  # noqa: E402

TEST_BACKEND_URL = "http://backend.internal:5001"


@pytest.fixture
def gateway_config():
    """Development-mode config pointing at a fake backend, metrics off."""
    return GatewayConfig(
        backend_url=TEST_BACKEND_URL,
        port=8081,
        proxy_prefix="/api",
        timeout=5.0,
        environment="development",
        metrics_enabled=False,
    )


@pytest.fixture
def upstream_response():
    """Factory for real httpx responses as the backend would send them."""

    def _create_response(status_code=200, **kwargs):
        return httpx.Response(status_code, **kwargs)

    return _create_response
