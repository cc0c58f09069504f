"""Clients for the remote account API."""

from webhook_listen.api.endpoints import ApiEndpointLister, EndpointLister

__all__ = [
    "ApiEndpointLister",
    "EndpointLister",
]
