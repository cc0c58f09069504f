from typing import Iterable, List

from loguru import logger

from webhook_listen.common.errors import InvalidEndpointURLError
from webhook_listen.common.metrics import metrics
from webhook_listen.common.models import ForwardTarget, RegisteredEndpoint, ResolvedRoute
from webhook_listen.routing.urls import (
    build_forward_url,
    normalize_forward_url,
    parse_endpoint_url,
)


def build_endpoint_routes(
    endpoints: Iterable[RegisteredEndpoint],
    direct_target: ForwardTarget,
    connect_target: ForwardTarget,
) -> List[ResolvedRoute]:
    """Resolve one local delivery route per registered endpoint.

    Endpoints registered in the dashboard usually point at a public host, so
    only their path is kept and grafted onto the matching forward target.
    Endpoints whose url cannot be parsed are skipped; an unusable forward
    target raises ``ForwardURLError``.
    """
    routes = []

    for endpoint in endpoints:
        try:
            destination = parse_endpoint_url(endpoint.url)
        except InvalidEndpointURLError as e:
            metrics.endpoints_skipped_total.inc()
            logger.warning(f"Skipping webhook endpoint: {e}")
            continue

        target = connect_target if endpoint.connect else direct_target
        forward_url = normalize_forward_url(target.raw_spec)

        route = ResolvedRoute(
            url=build_forward_url(forward_url, destination),
            forward_headers=list(target.headers),
            connect=endpoint.connect,
            event_types=list(endpoint.enabled_events),
        )
        scope = "connect" if route.connect else "direct"
        metrics.routes_resolved_total.labels(scope=scope).inc()
        logger.debug(f"Resolved {scope} route {endpoint.url} -> {route.url}")
        routes.append(route)

    return routes
