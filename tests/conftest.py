"""Shared test fixtures for the Courier test suite."""

import os
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import httpx
import pytest

from courier.ledger import InMemoryEventLedger
from courier.subscriptions import InMemorySubscriptionStore
from courier.webhooks.dispatcher import WebhookDispatcher
from courier.webhooks.signing import WebhookSigner

TEST_SECRET = "test-secret"


@pytest.fixture
def test_config_dir(tmp_path: Path) -> Path:
    """Create a temporary config directory for testing."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Factory fixture to create TOML files in the test config directory.

    Usage:
        def test_something(mock_toml_files):
            mock_toml_files({
                "default.toml": "app_name = 'test'",
                "development.toml": "debug = true",
            })
    """

    def _create_toml_files(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _create_toml_files


class EnvOverrideContext:
    """Context manager for temporarily setting environment variables."""

    def __init__(self, overrides: dict[str, str]) -> None:
        self.overrides = overrides
        self.original_env: dict[str, str | None] = {}

    def __enter__(self) -> None:
        for key, value in self.overrides.items():
            self.original_env[key] = os.environ.get(key)
            os.environ[key] = value

    def __exit__(self, *args: Any) -> None:
        for key in self.overrides:
            if self.original_env[key] is None:
                os.environ.pop(key, None)
            else:
                os.environ[key] = self.original_env[key]


@pytest.fixture
def env_override() -> Callable[[dict[str, str]], EnvOverrideContext]:
    """Temporarily set environment variables.

    Usage:
        def test_something(env_override):
            with env_override({"COURIER_DEBUG": "true"}):
                ...
    """

    def _env_override(overrides: dict[str, str]) -> EnvOverrideContext:
        return EnvOverrideContext(overrides)

    return _env_override


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    """Clear the settings cache before and after each test."""
    from courier.config import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class FakeEndpoints:
    """Stand-in for subscriber callbacks, served through httpx.MockTransport.

    URLs without a canned outcome answer 200 "OK". Every request is kept
    so tests can inspect headers and bodies.
    """

    def __init__(self) -> None:
        self._outcomes: dict[str, tuple[int, str] | tuple[type[httpx.HTTPError], str]] = {}
        self.requests: list[httpx.Request] = []

    def respond(self, url: str, status_code: int = 200, text: str = "OK") -> None:
        self._outcomes[url] = (status_code, text)

    def fail(
        self,
        url: str,
        exc_type: type[httpx.HTTPError] = httpx.ConnectError,
        message: str = "Connection refused",
    ) -> None:
        self._outcomes[url] = (exc_type, message)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        outcome, detail = self._outcomes.get(str(request.url), (200, "OK"))
        if isinstance(outcome, int):
            return httpx.Response(outcome, text=detail)
        raise outcome(detail, request=request)

    def requests_to(self, url: str) -> list[httpx.Request]:
        return [r for r in self.requests if str(r.url) == url]


@pytest.fixture
def endpoints() -> FakeEndpoints:
    return FakeEndpoints()


@pytest.fixture
def http_client(endpoints: FakeEndpoints) -> httpx.AsyncClient:
    """Outbound client whose requests are answered by `endpoints`."""
    return httpx.AsyncClient(transport=httpx.MockTransport(endpoints.handler))


@pytest.fixture
def subscription_store() -> InMemorySubscriptionStore:
    return InMemorySubscriptionStore()


@pytest.fixture
def event_ledger() -> InMemoryEventLedger:
    return InMemoryEventLedger()


@pytest.fixture
def signer() -> WebhookSigner:
    return WebhookSigner(TEST_SECRET)


@pytest.fixture
def dispatcher(
    subscription_store: InMemorySubscriptionStore,
    event_ledger: InMemoryEventLedger,
    signer: WebhookSigner,
    http_client: httpx.AsyncClient,
) -> WebhookDispatcher:
    return WebhookDispatcher(
        subscriptions=subscription_store,
        ledger=event_ledger,
        signer=signer,
        client=http_client,
    )
