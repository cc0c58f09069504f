import os
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from webhook_listen.api.endpoints import EndpointLister
from webhook_listen.common.config import ListenConfig, RelayConfig
from webhook_listen.common.models import (
    ForwardTarget,
    RegisteredEndpoint,
    RelayEvent,
    ResolvedRoute,
    RunResult,
)
from webhook_listen.relay.base import Relay
from webhook_listen.relay.server import create_app


class MockEndpointLister(EndpointLister):
    """Mock implementation of EndpointLister for testing."""

    def __init__(self, endpoints=None):
        self.endpoints = list(endpoints or [])
        self.calls = []

    async def list_endpoints(self, api_base, api_key):
        self.calls.append((api_base, api_key))
        return list(self.endpoints)


class MockRelay(Relay):
    """Mock implementation of Relay that records the config it was started with."""

    def __init__(self, result=None):
        self.result = result or RunResult()
        self.started_with = []

    def start(self, config):
        self.started_with.append(config)
        return self.result


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep WEBHOOK_LISTEN_* variables of the host out of the tests."""
    for key in list(os.environ):
        if key.startswith("WEBHOOK_LISTEN_"):
            monkeypatch.delenv(key)


@pytest.fixture
def registered_endpoints():
    """Fixture that provides endpoints as listed by the API, one of them malformed."""
    return [
        RegisteredEndpoint(
            url="https://example.com/a",
            enabled_events=["charge.succeeded"],
        ),
        RegisteredEndpoint(url="not a url", enabled_events=["*"]),
        RegisteredEndpoint(
            url="https://example.com/b",
            enabled_events=["account.updated", "payout.paid"],
            connect=True,
        ),
    ]


@pytest.fixture
def mock_endpoint_lister(registered_endpoints):
    return MockEndpointLister(registered_endpoints)


@pytest.fixture
def mock_relay():
    return MockRelay()


@pytest.fixture
def direct_target():
    return ForwardTarget(raw_spec="3000", headers=["X-Direct: yes"])


@pytest.fixture
def connect_target():
    return ForwardTarget(raw_spec="4000", headers=["X-Connect: yes"])


@pytest.fixture
def listen_config():
    """Fixture that provides a listen configuration loading endpoints from the API."""
    return ListenConfig(
        log_level="INFO",
        forward_to="localhost:3000/webhooks",
        forward_connect_to="localhost:4000",
        headers=["Authorization: Bearer local"],
        connect_headers=["X-Connect: yes"],
        events=["*"],
        use_configured_webhooks=True,
        api_key="sk_test_123",
        api_base="https://api.example.com",
    )


@pytest.fixture
def resolved_routes():
    return [
        ResolvedRoute(
            url="http://localhost:3000/a",
            forward_headers=["Authorization: Bearer local"],
            connect=False,
            event_types=["charge.succeeded"],
        ),
        ResolvedRoute(
            url="http://localhost:4000/b",
            forward_headers=["X-Connect: yes"],
            connect=True,
            event_types=["*"],
        ),
    ]


@pytest.fixture
def relay_config(resolved_routes):
    return RelayConfig(routes=resolved_routes, events=["*"])


@pytest.fixture
def sample_event():
    payload = {
        "id": "evt_123",
        "object": "event",
        "type": "charge.succeeded",
        "data": {"object": {"id": "ch_123", "amount": 2000}},
    }
    return RelayEvent.from_payload(payload)


@pytest.fixture
def connect_event():
    payload = {
        "id": "evt_456",
        "object": "event",
        "type": "account.updated",
        "account": "acct_123",
        "data": {"object": {"id": "acct_123"}},
    }
    return RelayEvent.from_payload(payload)


@pytest.fixture
def mock_dispatcher():
    dispatcher = MagicMock()
    dispatcher.dispatch = AsyncMock(return_value=[])
    return dispatcher


@pytest.fixture
def relay_app(relay_config, mock_dispatcher):
    """Fixture that provides a relay FastAPI app with a mocked dispatcher."""
    return create_app(relay_config, dispatcher=mock_dispatcher)


@pytest.fixture
def relay_client(relay_app):
    """Fixture that provides a test client for the relay API."""
    return TestClient(relay_app)
