"""
Shared pytest fixtures for nbws tests.

Every test runs without workspace credentials and without real sleeps:
retry backoff is patched out, and the cached client is dropped afterwards
so one test's configuration can't leak into the next.
"""

from typing import Generator
from unittest.mock import MagicMock, patch

import pytest

from adapters.services import clear_client_cache
from config import ENV_HOST, ENV_LOG_LEVEL, ENV_TIMEOUT, ENV_TOKEN
from logging_config import logger

# Re-export for convenience (actual implementation in mock_utils.py)
from tests.mock_utils import error_response, make_remote_error  # noqa: F401, E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Remove workspace settings from the environment and reset the client cache."""
    for name in (ENV_HOST, ENV_TOKEN, ENV_TIMEOUT, ENV_LOG_LEVEL):
        monkeypatch.delenv(name, raising=False)
    clear_client_cache()
    yield
    clear_client_cache()
    # cli.main() attaches a stderr handler bound to that test's capture
    logger.handlers.clear()


@pytest.fixture(autouse=True)
def no_retry_sleep() -> Generator[MagicMock, None, None]:
    """Patch out backoff sleeps. Yields the mock for tests that count retries."""
    with patch("retry.time.sleep") as mock_sleep:
        yield mock_sleep


@pytest.fixture
def configured_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """A complete, valid workspace configuration."""
    monkeypatch.setenv(ENV_HOST, "ws.test")
    monkeypatch.setenv(ENV_TOKEN, "dapi-test")
