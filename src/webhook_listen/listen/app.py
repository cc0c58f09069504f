import asyncio
import sys
from pathlib import Path
from typing import Iterable, List, Optional

import click
import yaml
from loguru import logger

from webhook_listen.api.endpoints import ApiEndpointLister, EndpointLister
from webhook_listen.common.config import ListenConfig
from webhook_listen.common.metrics import start_metrics_server
from webhook_listen.common.models import RunResult
from webhook_listen.listen.command import prepare_relay_config
from webhook_listen.relay.base import Relay
from webhook_listen.relay.server import HttpRelay


_app_config: Optional[ListenConfig] = None


def get_app_config() -> ListenConfig:
    global _app_config
    if not _app_config:
        raise RuntimeError("Application config not initialized")
    return _app_config


def load_config_from_file(config_path: str) -> ListenConfig:
    """Load configuration from a YAML file."""
    file_path = Path(config_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(file_path, "r") as f:
        config_data = yaml.safe_load(f) or {}

    return ListenConfig.model_validate(config_data)


def setup_app(config: ListenConfig):
    """Initialize the application with the given config."""
    global _app_config

    logger.remove()
    logger.add(
        sys.stderr,
        level=config.log_level,
        format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    )

    _app_config = config


def run_listen(
    config: ListenConfig,
    lister: Optional[EndpointLister] = None,
    relay: Optional[Relay] = None,
) -> RunResult:
    """Resolve the forwarding routes and hand them to the relay."""
    lister = lister or ApiEndpointLister(api_version=config.api_version, timeout=config.timeout)
    relay = relay or HttpRelay()

    relay_config = asyncio.run(prepare_relay_config(config, lister))

    if config.metrics.enabled:
        start_metrics_server(config.metrics.port, config.metrics.host)
        logger.info(f"Metrics server started on {config.metrics.host}:{config.metrics.port}")

    return relay.start(relay_config)


def split_values(values: Iterable[str]) -> List[str]:
    """Flatten repeated, comma-separated option values."""
    return [item.strip() for value in values for item in value.split(",") if item.strip()]


@click.group()
def cli():
    """Webhook Listen CLI"""
    pass


@cli.command("listen")
@click.option("--config", "config_path", help="Path to configuration file")
@click.option("--forward-to", "-f", help="The URL to forward webhook events to")
@click.option(
    "--forward-connect-to",
    "-c",
    help="The URL to forward Connect webhook events to (default: same as normal events)",
)
@click.option(
    "--headers",
    "-H",
    multiple=True,
    help="A comma-separated list of custom headers to forward",
)
@click.option(
    "--connect-headers",
    multiple=True,
    help="A comma-separated list of custom headers to forward for Connect",
)
@click.option(
    "--events",
    "-e",
    multiple=True,
    help="A comma-separated list of specific events to listen for (default: *)",
)
@click.option(
    "--use-configured-webhooks",
    "--load-from-webhooks-api",
    "-a",
    "use_configured_webhooks",
    is_flag=True,
    help="Load webhook endpoint configuration from the webhooks API",
)
@click.option("--api-key", help="API key used to load webhook endpoints")
@click.option("--api-base", hidden=True, help="Sets the API base URL")
@click.option(
    "--skip-verify",
    is_flag=True,
    help="Skip certificate verification when forwarding to HTTPS endpoints",
)
@click.option("--print-json", "-j", is_flag=True, help="Print full JSON objects to stdout")
@click.option("--host", help="Address the relay listens on")
@click.option("--port", type=int, help="Port the relay listens on")
@click.option("--log-level", help="Log level")
def listen(
    config_path: Optional[str],
    forward_to: Optional[str],
    forward_connect_to: Optional[str],
    headers: tuple,
    connect_headers: tuple,
    events: tuple,
    use_configured_webhooks: bool,
    api_key: Optional[str],
    api_base: Optional[str],
    skip_verify: bool,
    print_json: bool,
    host: Optional[str],
    port: Optional[int],
    log_level: Optional[str],
):
    """Listen for webhook events and forward them to local endpoints."""
    overrides = {
        "forward_to": forward_to,
        "forward_connect_to": forward_connect_to,
        "api_key": api_key,
        "api_base": api_base,
        "host": host,
        "port": port,
        "log_level": log_level,
        "headers": split_values(headers) or None,
        "connect_headers": split_values(connect_headers) or None,
        "events": split_values(events) or None,
        # Flags only override the file or environment when given
        "use_configured_webhooks": use_configured_webhooks or None,
        "skip_verify": skip_verify or None,
        "print_json": print_json or None,
    }

    try:
        config_obj = load_config_from_file(config_path) if config_path else ListenConfig()
        config_obj = config_obj.model_copy(
            update={key: value for key, value in overrides.items() if value is not None}
        )
        setup_app(config_obj)
        result = run_listen(config_obj)
    except Exception as e:
        logger.error(f"Failed to start listener: {e}")
        sys.exit(1)

    if not result.ok:
        logger.error(f"Relay stopped with an error: {result.error}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
