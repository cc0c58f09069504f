"""Route resolution from registered endpoints to local forwarding URLs."""

from webhook_listen.routing.events import (
    KNOWN_EVENT_TYPES,
    WILDCARD,
    validate_event_types,
)
from webhook_listen.routing.resolver import build_endpoint_routes
from webhook_listen.routing.urls import (
    build_forward_url,
    normalize_forward_url,
    parse_endpoint_url,
    split_absolute_url,
)

__all__ = [
    "KNOWN_EVENT_TYPES",
    "WILDCARD",
    "validate_event_types",
    "build_endpoint_routes",
    "build_forward_url",
    "normalize_forward_url",
    "parse_endpoint_url",
    "split_absolute_url",
]
