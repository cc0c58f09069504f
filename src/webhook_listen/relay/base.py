from abc import ABC, abstractmethod

from webhook_listen.common.config import RelayConfig
from webhook_listen.common.models import RunResult


class Relay(ABC):
    """Receives events and delivers them along the resolved routes."""

    @abstractmethod
    def start(self, config: RelayConfig) -> RunResult:
        pass
