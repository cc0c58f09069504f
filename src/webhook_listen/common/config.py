from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from webhook_listen.common.models import ForwardTarget, ResolvedRoute

DEFAULT_API_BASE = "https://api.stripe.com"
# The endpoint listing is pinned to the API version it was written against
DEFAULT_API_VERSION = "2019-03-14"


class MetricsConfig(BaseModel):
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 9090


class ListenConfig(BaseSettings):
    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_prefix="WEBHOOK_LISTEN_",
        extra="ignore",
    )

    log_level: str = "INFO"
    forward_to: str = ""
    forward_connect_to: str = ""
    headers: List[str] = Field(default_factory=list)
    connect_headers: List[str] = Field(default_factory=list)
    events: List[str] = Field(default_factory=lambda: ["*"])
    use_configured_webhooks: bool = False
    api_key: Optional[str] = None
    api_base: str = DEFAULT_API_BASE
    api_version: str = DEFAULT_API_VERSION
    host: str = "127.0.0.1"
    port: int = 4242
    skip_verify: bool = False
    print_json: bool = False
    timeout: int = 10  # seconds
    metrics: MetricsConfig = MetricsConfig()

    @property
    def direct_target(self) -> ForwardTarget:
        return ForwardTarget(raw_spec=self.forward_to, headers=self.headers)

    @property
    def connect_target(self) -> ForwardTarget:
        if not self.forward_connect_to:
            # Connect traffic reuses the direct target unless told otherwise
            return ForwardTarget(
                raw_spec=self.forward_to,
                headers=self.connect_headers or self.headers,
            )
        return ForwardTarget(raw_spec=self.forward_connect_to, headers=self.connect_headers)


class RelayConfig(BaseModel):
    routes: List[ResolvedRoute] = Field(default_factory=list)
    events: List[str] = Field(default_factory=lambda: ["*"])
    host: str = "127.0.0.1"
    port: int = 4242
    skip_verify: bool = False
    print_json: bool = False
    timeout: int = 10
    log_level: str = "INFO"
