import json
from typing import Dict, Iterable, List

import aiohttp
from loguru import logger

from webhook_listen.common.metrics import measure_time, metrics
from webhook_listen.common.models import DeliveryResult, RelayEvent, ResolvedRoute


def parse_headers(values: Iterable[str]) -> Dict[str, str]:
    """Parse ``Name: value`` strings into a header dict, later values win."""
    headers = {}
    for value in values:
        name, sep, content = value.partition(":")
        if not sep or not name.strip():
            logger.warning(f"Ignoring malformed header {value!r}, expected 'Name: value'")
            continue
        headers[name.strip()] = content.strip()
    return headers


def _scope(event: RelayEvent) -> str:
    return "connect" if event.connect else "direct"


class EventDispatcher:
    def __init__(
        self,
        routes: List[ResolvedRoute],
        skip_verify: bool = False,
        timeout: int = 10,
    ):
        self.routes = list(routes)
        self.skip_verify = skip_verify
        self.timeout = timeout

    def matching_routes(self, event: RelayEvent) -> List[ResolvedRoute]:
        """Routes in the event's scope that subscribe to its type."""
        return [
            route
            for route in self.routes
            if route.connect == event.connect and route.accepts(event.type)
        ]

    async def forward_event(
        self, session: aiohttp.ClientSession, route: ResolvedRoute, event: RelayEvent
    ) -> DeliveryResult:
        headers = {
            "Content-Type": "application/json",
            "User-Agent": "webhook-listen",
        }
        headers.update(parse_headers(route.forward_headers))

        try:
            async with session.post(
                route.url,
                headers=headers,
                data=json.dumps(event.payload),
                ssl=not self.skip_verify,
            ) as response:
                if response.status < 400:
                    metrics.forward_total.labels(target=route.url).inc()
                    logger.info(f"<-- [{response.status}] POST {route.url} [{event.id}]")
                else:
                    metrics.forward_errors.labels(
                        target=route.url,
                        status_code=response.status,
                    ).inc()
                    response_text = await response.text()
                    logger.error(
                        f"Failed to forward event {event.id} to {route.url} "
                        f"(status={response.status}): {response_text}"
                    )
                return DeliveryResult(url=route.url, status=response.status)
        except Exception as e:
            metrics.forward_errors.labels(target=route.url, status_code="error").inc()
            logger.error(f"Error forwarding event {event.id} to {route.url}: {e}")
            return DeliveryResult(url=route.url, error=str(e))

    @measure_time(metrics.forward_latency, lambda self, event: {"scope": _scope(event)})
    async def dispatch(self, event: RelayEvent) -> List[DeliveryResult]:
        """Deliver ``event`` once to every matching route."""
        routes = self.matching_routes(event)
        if not routes:
            logger.debug(f"No route for {_scope(event)} event {event.id} ({event.type})")
            return []

        async with aiohttp.ClientSession(
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as session:
            return [await self.forward_event(session, route, event) for route in routes]
