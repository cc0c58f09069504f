from unittest.mock import patch

import pytest

from webhook_listen.common.errors import ForwardURLError
from webhook_listen.common.models import ForwardTarget, RegisteredEndpoint
from webhook_listen.routing.resolver import build_endpoint_routes


class TestBuildEndpointRoutes:

    def test_routes_partitioned_and_malformed_skipped(
        self, registered_endpoints, direct_target, connect_target
    ):
        """Test that each valid endpoint gets a route to its matching target."""
        routes = build_endpoint_routes(registered_endpoints, direct_target, connect_target)

        assert [route.url for route in routes] == [
            "http://localhost:3000/a",
            "http://localhost:4000/b",
        ]
        assert [route.connect for route in routes] == [False, True]

    def test_route_carries_target_headers_and_events(
        self, registered_endpoints, direct_target, connect_target
    ):
        """Test that routes carry the target headers and the endpoint event types."""
        direct, connect = build_endpoint_routes(
            registered_endpoints, direct_target, connect_target
        )

        assert direct.forward_headers == ["X-Direct: yes"]
        assert direct.event_types == ["charge.succeeded"]
        assert connect.forward_headers == ["X-Connect: yes"]
        assert connect.event_types == ["account.updated", "payout.paid"]

    def test_empty_endpoints(self, direct_target, connect_target):
        """Test that no endpoints resolve to no routes."""
        assert build_endpoint_routes([], direct_target, connect_target) == []

    def test_order_preserved(self, direct_target, connect_target):
        """Test that routes follow the listing order."""
        endpoints = [
            RegisteredEndpoint(url=f"https://example.com/{name}", connect=name in "bd")
            for name in "abcd"
        ]
        routes = build_endpoint_routes(endpoints, direct_target, connect_target)

        assert [route.url for route in routes] == [
            "http://localhost:3000/a",
            "http://localhost:4000/b",
            "http://localhost:3000/c",
            "http://localhost:4000/d",
        ]

    def test_base_path_of_target_kept(self):
        """Test that the forward target path prefixes each endpoint path."""
        endpoints = [RegisteredEndpoint(url="https://example.com/stripe/hooks")]
        target = ForwardTarget(raw_spec="localhost:3000/webhooks/")

        routes = build_endpoint_routes(endpoints, target, target)

        assert routes[0].url == "http://localhost:3000/webhooks/stripe/hooks"

    def test_skipped_endpoint_is_logged(self, registered_endpoints, direct_target, connect_target):
        """Test that a skipped endpoint produces a warning."""
        with patch("webhook_listen.routing.resolver.logger") as mock_logger:
            build_endpoint_routes(registered_endpoints, direct_target, connect_target)

        mock_logger.warning.assert_called_once()
        assert "not a url" in mock_logger.warning.call_args[0][0]

    def test_unparsable_target_raises(self, direct_target):
        """Test that a malformed forward target aborts resolution."""
        endpoints = [RegisteredEndpoint(url="https://example.com/a", connect=True)]

        with pytest.raises(ForwardURLError):
            build_endpoint_routes(endpoints, direct_target, ForwardTarget(raw_spec="bad host:1"))

    def test_non_http_endpoint_skipped(self, direct_target, connect_target):
        """Test that endpoints with a non-http(s) scheme are skipped."""
        endpoints = [
            RegisteredEndpoint(url="ftp://example.com/x"),
            RegisteredEndpoint(url="https://example.com/y"),
        ]

        routes = build_endpoint_routes(endpoints, direct_target, connect_target)

        assert [route.url for route in routes] == ["http://localhost:3000/y"]
