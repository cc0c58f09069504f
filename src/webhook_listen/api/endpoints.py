from abc import ABC, abstractmethod
from typing import List

import aiohttp
from loguru import logger

from webhook_listen.common.config import DEFAULT_API_VERSION
from webhook_listen.common.errors import EndpointListError
from webhook_listen.common.models import RegisteredEndpoint


class EndpointLister(ABC):
    @abstractmethod
    async def list_endpoints(self, api_base: str, api_key: str) -> List[RegisteredEndpoint]:
        pass


class ApiEndpointLister(EndpointLister):
    """Fetches the webhook endpoints configured on an account."""

    path = "/v1/webhook_endpoints"

    def __init__(self, api_version: str = DEFAULT_API_VERSION, timeout: int = 10, limit: int = 100):
        self.api_version = api_version
        self.timeout = timeout
        self.limit = limit

    async def list_endpoints(self, api_base: str, api_key: str) -> List[RegisteredEndpoint]:
        url = api_base.rstrip("/") + self.path
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Stripe-Version": self.api_version,
        }

        try:
            async with aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout)
            ) as session:
                async with session.get(
                    url, headers=headers, params={"limit": str(self.limit)}
                ) as response:
                    if response.status >= 400:
                        response_text = await response.text()
                        raise EndpointListError(
                            f"Failed to list webhook endpoints from {url} "
                            f"(status={response.status}): {response_text}"
                        )
                    body = await response.json()
        except aiohttp.ClientError as e:
            raise EndpointListError(f"Error listing webhook endpoints from {url}: {e}") from e

        endpoints = [RegisteredEndpoint.from_api(item) for item in body.get("data", [])]
        logger.debug(f"Fetched {len(endpoints)} webhook endpoints from {url}")
        return endpoints
