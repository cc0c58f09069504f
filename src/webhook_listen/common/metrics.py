import time
from functools import wraps
from typing import Callable, Dict, Optional, Union

from loguru import logger
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, start_http_server


class MetricsRegistry:
    def __init__(self, registry=None):
        # Use a provided registry or the default one
        self.registry = registry or REGISTRY

        # Route resolution metrics
        self.routes_resolved_total = Counter(
            "webhook_listen_routes_resolved_total",
            "Total number of endpoint routes resolved",
            ["scope"],
            registry=self.registry,
        )
        self.endpoints_skipped_total = Counter(
            "webhook_listen_endpoints_skipped_total",
            "Total number of registered endpoints skipped because of an invalid url",
            registry=self.registry,
        )
        self.unknown_event_types_total = Counter(
            "webhook_listen_unknown_event_types_total",
            "Total number of requested event types missing from the known catalog",
            registry=self.registry,
        )

        # Relay metrics
        self.events_received_total = Counter(
            "webhook_listen_events_received_total",
            "Total number of events received by the relay",
            ["scope"],
            registry=self.registry,
        )
        self.forward_total = Counter(
            "webhook_listen_forward_total",
            "Total number of events forwarded",
            ["target"],
            registry=self.registry,
        )
        self.forward_errors = Counter(
            "webhook_listen_forward_errors",
            "Total number of errors forwarding events",
            ["target", "status_code"],
            registry=self.registry,
        )
        self.forward_latency = Histogram(
            "webhook_listen_forward_seconds",
            "Time spent forwarding an event to its routes",
            ["scope"],
            registry=self.registry,
        )

        self.up = Gauge(
            "webhook_listen_up",
            "Whether the webhook listen relay is up",
            ["component"],
            registry=self.registry,
        )


# Global metrics registry
metrics = MetricsRegistry()


def start_metrics_server(port: int = 9090, host: str = "127.0.0.1"):
    """Start the Prometheus metrics server."""
    start_http_server(port, host)


def measure_time(
    metric: Histogram, labels: Optional[Union[Dict[str, str], Callable]] = None
) -> Callable:
    """Decorator to measure the execution time of a coroutine.

    ``labels`` is either a static dict or a callable receiving the first
    positional argument of the call (``self`` for methods, or the first
    parameter of a plain function) and returning the label dict.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            labels_dict = {}
            if callable(labels) and args:
                try:
                    labels_dict = labels(*args)
                except Exception as e:
                    logger.error(f"Error getting labels from function: {e}")
            elif isinstance(labels, dict):
                labels_dict = labels

            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                try:
                    metric.labels(**labels_dict).observe(duration)
                except Exception as e:
                    logger.error(f"Error recording metric: {e}")

        return wrapper

    return decorator
