"""Shared test fixtures and configuration."""
import asyncio
import os
from typing import Any, Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

# Set test environment variables before importing app
os.environ.setdefault("RETELL_API_KEY", "key_test")
os.environ.setdefault("AGENT_ID", "agent_8d6d93979343a84e1cdce8a15c")

from call_relay.main import app
from call_relay.core.config import Settings
from call_relay.core.dependencies import get_retell_client, get_settings
from call_relay.services.retell.client import RetellClient
from call_relay.services.widget.base import CallClient, LegacyCall, LegacyCallFactory
from call_relay.services.widget.proxy_client import CallProxyClient
from call_relay.services.widget.widget import CallWidget


TEST_RETELL_BASE_URL = "https://api.retell.test"
TEST_PROXY_URL = "http://proxy.test/create-web-call"
DEFAULT_AGENT_ID = "agent_8d6d93979343a84e1cdce8a15c"


class HttpStub:
    """Records requests and answers them with ``responder``."""

    def __init__(self, responder: Optional[Callable[[httpx.Request], Any]] = None):
        self.requests: List[httpx.Request] = []
        self.responder = responder or (lambda request: httpx.Response(200, json={}))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def reply(self, status_code: int = 200, **kwargs: Any) -> None:
        """Answer every following request with a fixed response."""
        self.responder = lambda request: httpx.Response(status_code, **kwargs)

    def fail(self, error: Exception) -> None:
        """Raise ``error`` for every following request."""

        def _raise(request: httpx.Request) -> httpx.Response:
            raise error

        self.responder = _raise


class FakeCallClient(CallClient):
    """Call client double; records calls instead of joining anything."""

    def __init__(self):
        super().__init__()
        self.started_tokens: List[str] = []
        self.terminate_calls = 0
        self.start_error: Optional[Exception] = None
        self.terminate_error: Optional[Exception] = None
        self.hang_on_start = False

    async def start_call(self, access_token: str) -> None:
        self.started_tokens.append(access_token)
        if self.start_error is not None:
            raise self.start_error
        if self.hang_on_start:
            await asyncio.Event().wait()

    async def terminate(self) -> None:
        self.terminate_calls += 1
        if self.terminate_error is not None:
            raise self.terminate_error


class FakeLegacyCall(LegacyCall):
    def __init__(self, conversation_id: str):
        self.conversation_id = conversation_id
        self.started = False

    async def start(self) -> None:
        self.started = True


class FakeLegacyFactory(LegacyCallFactory):
    def __init__(self):
        self.calls: List[FakeLegacyCall] = []

    async def create_call_object(self, conversation_id: str) -> FakeLegacyCall:
        call = FakeLegacyCall(conversation_id)
        self.calls.append(call)
        return call


@pytest.fixture
def test_settings():
    """Override settings for testing."""
    return Settings(
        retell_api_key="key_test",
        agent_id=DEFAULT_AGENT_ID,
        retell_base_url=TEST_RETELL_BASE_URL,
        widget_proxy_url=TEST_PROXY_URL,
        widget_connect_timeout_seconds=None,
    )


@pytest.fixture
def retell_stub():
    """Stands in for the Retell API."""
    return HttpStub()


@pytest.fixture
def test_client(test_settings, retell_stub):
    """Create FastAPI test client with overrides."""

    def _override_get_retell_client():
        return RetellClient(
            api_key=test_settings.retell_api_key,
            base_url=test_settings.retell_base_url,
            timeout=test_settings.retell_timeout_seconds,
            transport=retell_stub.transport,
        )

    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_retell_client] = _override_get_retell_client

    client = TestClient(app)

    yield client

    # Clear overrides
    app.dependency_overrides.clear()


@pytest.fixture
def proxy_stub():
    """Stands in for the call proxy as seen by the widget."""
    return HttpStub()


@pytest.fixture
def call_client():
    return FakeCallClient()


@pytest.fixture
def legacy_factory():
    return FakeLegacyFactory()


@pytest.fixture
def notifications():
    return []


@pytest.fixture
def opened_urls():
    return []


@pytest.fixture
def make_widget(proxy_stub, call_client, notifications, opened_urls):
    """Build a widget wired to the stubs; keyword arguments override defaults."""
    widgets = []

    def _make(**kwargs: Any) -> CallWidget:
        options = dict(
            proxy=CallProxyClient(TEST_PROXY_URL, transport=proxy_stub.transport),
            call_client=call_client,
            agent_id="agent_8e3ee5fa5f3ee9e20ea6cbcccf",
            open_url=opened_urls.append,
            notify=notifications.append,
        )
        options.update(kwargs)
        widget = CallWidget(**options)
        widgets.append(widget)
        return widget

    yield _make

    for widget in widgets:
        widget.close()
