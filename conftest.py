# Ensure tests import the package from this checkout first, even when another
# version of holy-cors is installed in the environment.
import os
import sys

import pytest

SERVICE_ROOT = os.path.dirname(__file__)

if SERVICE_ROOT not in sys.path:
    sys.path.insert(0, SERVICE_ROOT)

from holy_cors.config import Configuration  # noqa: E402


@pytest.fixture
def config():
    """Configuration with only the built-in origins plus one local dev origin."""
    return Configuration(allow_origins=("http://localhost:3000",), timeout=5.0)


@pytest.fixture
def client(config):
    from fastapi.testclient import TestClient

    from holy_cors.server import create_app

    with TestClient(create_app(config)) as test_client:
        yield test_client
