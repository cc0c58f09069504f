"""Common configuration, models and utilities for webhook listen."""

from webhook_listen.common.config import (
    DEFAULT_API_BASE,
    DEFAULT_API_VERSION,
    ListenConfig,
    MetricsConfig,
    RelayConfig,
)
from webhook_listen.common.errors import (
    ConfigurationError,
    EndpointListError,
    ForwardURLError,
    InvalidEndpointURLError,
    ListenError,
)
from webhook_listen.common.metrics import (
    MetricsRegistry,
    measure_time,
    metrics,
    start_metrics_server,
)
from webhook_listen.common.models import (
    DeliveryResult,
    ForwardTarget,
    RegisteredEndpoint,
    RelayEvent,
    ResolvedRoute,
    RunResult,
)

__all__ = [
    # Config
    "DEFAULT_API_BASE",
    "DEFAULT_API_VERSION",
    "ListenConfig",
    "MetricsConfig",
    "RelayConfig",
    # Errors
    "ConfigurationError",
    "EndpointListError",
    "ForwardURLError",
    "InvalidEndpointURLError",
    "ListenError",
    # Metrics
    "MetricsRegistry",
    "measure_time",
    "metrics",
    "start_metrics_server",
    # Models
    "DeliveryResult",
    "ForwardTarget",
    "RegisteredEndpoint",
    "RelayEvent",
    "ResolvedRoute",
    "RunResult",
]
