"""Relay component delivering events along resolved routes."""

from webhook_listen.relay.base import Relay
from webhook_listen.relay.dispatcher import EventDispatcher, parse_headers
from webhook_listen.relay.server import HttpRelay, create_app

__all__ = [
    "Relay",
    "EventDispatcher",
    "parse_headers",
    "HttpRelay",
    "create_app",
]
