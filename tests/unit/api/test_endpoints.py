from unittest.mock import AsyncMock, MagicMock, patch

import aiohttp
import pytest

from webhook_listen.api.endpoints import ApiEndpointLister
from webhook_listen.common.errors import EndpointListError


def mock_session_with_response(status, body=None, text=""):
    """Build a mocked ClientSession whose get() yields the given response."""
    mock_response = MagicMock()
    mock_response.status = status
    mock_response.json = AsyncMock(return_value=body)
    mock_response.text = AsyncMock(return_value=text)

    cm = MagicMock()
    cm.__aenter__ = AsyncMock(return_value=mock_response)
    cm.__aexit__ = AsyncMock(return_value=None)

    mock_session = MagicMock()
    mock_session.__aenter__ = AsyncMock(return_value=mock_session)
    mock_session.__aexit__ = AsyncMock(return_value=None)
    mock_session.get = MagicMock(return_value=cm)
    return mock_session


class TestApiEndpointLister:

    @pytest.fixture
    def lister(self):
        return ApiEndpointLister(api_version="2019-03-14", timeout=5)

    @pytest.mark.asyncio
    async def test_list_endpoints(self, lister):
        """Test that webhook endpoints are fetched and parsed."""
        body = {
            "object": "list",
            "data": [
                {"url": "https://example.com/a", "enabled_events": ["*"], "application": None},
                {"url": "https://example.com/b", "enabled_events": ["payout.paid"], "application": "ca_1"},
            ],
        }
        mock_session = mock_session_with_response(200, body)

        with patch("aiohttp.ClientSession", return_value=mock_session):
            endpoints = await lister.list_endpoints("https://api.example.com/", "sk_test_123")

        assert [endpoint.url for endpoint in endpoints] == [
            "https://example.com/a",
            "https://example.com/b",
        ]
        assert [endpoint.connect for endpoint in endpoints] == [False, True]

        args, kwargs = mock_session.get.call_args
        assert args[0] == "https://api.example.com/v1/webhook_endpoints"
        assert kwargs["headers"]["Authorization"] == "Bearer sk_test_123"
        assert kwargs["headers"]["Stripe-Version"] == "2019-03-14"
        assert kwargs["params"] == {"limit": "100"}

    @pytest.mark.asyncio
    async def test_list_endpoints_empty(self, lister):
        """Test that an empty listing is returned as an empty list."""
        mock_session = mock_session_with_response(200, {"data": []})

        with patch("aiohttp.ClientSession", return_value=mock_session):
            endpoints = await lister.list_endpoints("https://api.example.com", "sk_test_123")

        assert endpoints == []

    @pytest.mark.asyncio
    async def test_list_endpoints_error_status(self, lister):
        """Test that an error response is a fatal listing error."""
        mock_session = mock_session_with_response(401, text="Invalid API Key")

        with patch("aiohttp.ClientSession", return_value=mock_session):
            with pytest.raises(EndpointListError, match="status=401"):
                await lister.list_endpoints("https://api.example.com", "sk_bad")

    @pytest.mark.asyncio
    async def test_list_endpoints_connection_error(self, lister):
        """Test that transport failures are reported as listing errors."""
        mock_session = mock_session_with_response(200)
        mock_session.get.side_effect = aiohttp.ClientConnectionError("Connection refused")

        with patch("aiohttp.ClientSession", return_value=mock_session):
            with pytest.raises(EndpointListError, match="Connection refused"):
                await lister.list_endpoints("https://api.example.com", "sk_test_123")
