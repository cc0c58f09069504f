"""Turns a ``ListenConfig`` into the route table handed to the relay."""

from typing import List

from loguru import logger

from webhook_listen.api.endpoints import EndpointLister
from webhook_listen.common.config import ListenConfig, RelayConfig
from webhook_listen.common.errors import ConfigurationError, ForwardURLError
from webhook_listen.common.metrics import metrics
from webhook_listen.common.models import ResolvedRoute
from webhook_listen.routing.events import validate_event_types
from webhook_listen.routing.resolver import build_endpoint_routes
from webhook_listen.routing.urls import normalize_forward_url, split_absolute_url


def warn_unknown_event_types(events: List[str]) -> List[str]:
    unknown = validate_event_types(events)
    for event in unknown:
        metrics.unknown_event_types_total.inc()
        logger.warning(f'You\'re attempting to listen for "{event}", which isn\'t a valid event')
    return unknown


async def load_endpoint_routes(config: ListenConfig, lister: EndpointLister) -> List[ResolvedRoute]:
    if not config.forward_to:
        raise ConfigurationError(
            "--use-configured-webhooks requires a location to forward to with --forward-to"
        )
    if config.forward_to.startswith("/"):
        raise ConfigurationError(
            "--forward-to cannot be a relative path when loading webhook endpoints from the API"
        )
    if config.forward_connect_to.startswith("/"):
        raise ConfigurationError(
            "--forward-connect-to cannot be a relative path when loading webhook endpoints from the API"
        )
    if not config.api_key:
        raise ConfigurationError(
            "An API key is required to load webhook endpoints from the API, pass --api-key"
        )

    endpoints = await lister.list_endpoints(config.api_base, config.api_key)
    if not endpoints:
        raise ConfigurationError(
            "You have not defined any webhook endpoints on your account. "
            "Add some in the dashboard before using --use-configured-webhooks"
        )

    logger.info(f"Loaded {len(endpoints)} webhook endpoints from {config.api_base}")
    return build_endpoint_routes(endpoints, config.direct_target, config.connect_target)


def build_default_routes(config: ListenConfig) -> List[ResolvedRoute]:
    """Direct and connect routes for whichever forward targets are set."""
    targets = []
    if config.forward_to:
        targets.append((config.direct_target, False))
    if config.forward_connect_to or config.forward_to:
        targets.append((config.connect_target, True))

    routes = []
    for target, connect in targets:
        url = normalize_forward_url(target.raw_spec)
        try:
            split_absolute_url(url)
        except ValueError:
            raise ForwardURLError(target.raw_spec) from None

        routes.append(
            ResolvedRoute(
                url=url,
                forward_headers=list(target.headers),
                connect=connect,
                event_types=list(config.events),
            )
        )
    return routes


async def prepare_relay_config(config: ListenConfig, lister: EndpointLister) -> RelayConfig:
    warn_unknown_event_types(config.events)

    if config.use_configured_webhooks:
        routes = await load_endpoint_routes(config, lister)
    else:
        routes = build_default_routes(config)

    return RelayConfig(
        routes=routes,
        events=config.events,
        host=config.host,
        port=config.port,
        skip_verify=config.skip_verify,
        print_json=config.print_json,
        timeout=config.timeout,
        log_level=config.log_level,
    )
