from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger

from webhook_listen.common.config import RelayConfig
from webhook_listen.common.metrics import metrics
from webhook_listen.common.models import RunResult
from webhook_listen.relay.base import Relay
from webhook_listen.relay.dispatcher import EventDispatcher
from webhook_listen.relay.routes import router


def create_app(config: RelayConfig, dispatcher: Optional[EventDispatcher] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        metrics.up.labels(component="relay").set(1)

        logger.info(f"Webhook Listen Relay started on {config.host}:{config.port}")
        if not config.routes:
            logger.info("No forwarding routes configured, events will only be logged")
        for route in config.routes:
            scope = "connect" if route.connect else "direct"
            logger.info(
                f"Forwarding {scope} events {', '.join(route.event_types) or '(none)'} to {route.url}"
            )

        yield

        metrics.up.labels(component="relay").set(0)
        logger.info("Webhook Listen Relay shutting down")

    app = FastAPI(
        title="Webhook Listen Relay",
        description="Receives events and forwards them to local endpoints",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config
    app.state.dispatcher = dispatcher or EventDispatcher(
        routes=config.routes,
        skip_verify=config.skip_verify,
        timeout=config.timeout,
    )

    app.include_router(router)

    return app


class HttpRelay(Relay):
    """Local HTTP ingress that relays posted events along the resolved routes."""

    def start(self, config: RelayConfig) -> RunResult:
        app = create_app(config)
        try:
            uvicorn.run(
                app,
                host=config.host,
                port=config.port,
                log_level=config.log_level.lower(),
            )
        except Exception as e:
            logger.error(f"Relay error: {e}")
            return RunResult(ok=False, error=str(e))
        except SystemExit as e:
            # uvicorn exits instead of raising when the server fails to start
            logger.error(f"Relay exited during startup (code={e.code})")
            return RunResult(ok=False, error=f"relay exited with code {e.code}")
        return RunResult()
