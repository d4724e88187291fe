"""Root conftest for all tests."""

from collections.abc import Generator
from typing import Awaitable, Callable

import pytest
from aiohttp.test_utils import TestClient
from aiohttp.web import Application

# Shared test constants
TEST_KEY = b"0001020304050607"
TEST_BASE_URL = "https://example.com/"

# Type alias for the aiohttp_client fixture - shared across all tests
AiohttpClient = Callable[[Application], Awaitable[TestClient]]

ENV_VARS = [
    "SIGNEDURL_CONFIG_DIR",
    "SIGNEDURL_SECRET_KEY",
    "SIGNEDURL_BASE_URL",
    "SIGNEDURL_HOST",
    "SIGNEDURL_PORT",
    "SIGNEDURL_DEFAULT_EXPIRATION",
]


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep settings from the host environment out of tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
