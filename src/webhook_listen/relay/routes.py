import json

from fastapi import APIRouter, Depends, HTTPException, Request
from loguru import logger

from webhook_listen.common.config import RelayConfig
from webhook_listen.common.metrics import metrics
from webhook_listen.common.models import RelayEvent
from webhook_listen.relay.dispatcher import EventDispatcher
from webhook_listen.routing.events import WILDCARD

router = APIRouter()


async def get_config(request: Request) -> RelayConfig:
    return request.app.state.config


async def get_dispatcher(request: Request) -> EventDispatcher:
    return request.app.state.dispatcher


@router.post("/events", status_code=202)
async def receive_event(
    request: Request,
    config: RelayConfig = Depends(get_config),
    dispatcher: EventDispatcher = Depends(get_dispatcher),
):
    body = await request.body()
    try:
        content = json.loads(body)
    except json.JSONDecodeError:
        raise HTTPException(status_code=400, detail="Invalid JSON payload")

    if not isinstance(content, dict) or not content.get("type"):
        raise HTTPException(status_code=400, detail="Event must be an object with a type")

    event = RelayEvent.from_payload(content)
    metrics.events_received_total.labels(
        scope="connect" if event.connect else "direct"
    ).inc()

    if WILDCARD not in config.events and event.type not in config.events:
        logger.debug(f"Ignoring event {event.id} of type {event.type}")
        return {"status": "ignored", "event_id": event.id, "deliveries": []}

    if config.print_json:
        print(json.dumps(content, indent=2), flush=True)
    else:
        logger.info(f"--> {event.type} [{event.id}]")

    results = await dispatcher.dispatch(event)
    return {
        "status": "accepted",
        "event_id": event.id,
        "deliveries": [result.model_dump() for result in results],
    }


@router.get("/health")
async def health_check():
    return {"status": "ok"}
