"""Command line entry point wiring configuration into the relay."""

from webhook_listen.listen.app import (
    cli,
    get_app_config,
    load_config_from_file,
    run_listen,
    setup_app,
)
from webhook_listen.listen.command import (
    build_default_routes,
    load_endpoint_routes,
    prepare_relay_config,
    warn_unknown_event_types,
)

__all__ = [
    "cli",
    "get_app_config",
    "load_config_from_file",
    "run_listen",
    "setup_app",
    "build_default_routes",
    "load_endpoint_routes",
    "prepare_relay_config",
    "warn_unknown_event_types",
]
