from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class RegisteredEndpoint(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    enabled_events: List[str] = Field(default_factory=list)
    connect: bool = False

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "RegisteredEndpoint":
        """Build an endpoint from a webhook endpoint object of the API listing."""
        return cls(
            url=data.get("url") or "",
            enabled_events=data.get("enabled_events") or [],
            # Endpoints owned by a Connect application receive connected account events
            connect=bool(data.get("application")),
        )


class ForwardTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    raw_spec: str = ""
    headers: List[str] = Field(default_factory=list)


class ResolvedRoute(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    forward_headers: List[str] = Field(default_factory=list)
    connect: bool = False
    event_types: List[str] = Field(default_factory=list)

    def accepts(self, event_type: str) -> bool:
        return "*" in self.event_types or event_type in self.event_types


class RelayEvent(BaseModel):
    id: str
    type: str
    account: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)

    @property
    def connect(self) -> bool:
        return bool(self.account)

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "RelayEvent":
        return cls(
            id=str(payload.get("id", "")),
            type=str(payload.get("type", "")),
            account=payload.get("account"),
            payload=payload,
        )


class DeliveryResult(BaseModel):
    url: str
    status: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status is not None and self.status < 400


class RunResult(BaseModel):
    ok: bool = True
    error: Optional[str] = None
