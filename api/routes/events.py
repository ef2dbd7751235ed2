"""Server-sent events relaying every broadcast to observing windows."""

import asyncio
import json
import logging

from fastapi import APIRouter
from fastapi.responses import StreamingResponse

from daggerboard.core.events import ChangeEvent

from ..deps import get_state_manager

logger = logging.getLogger(__name__)

router = APIRouter()

KEEPALIVE_SECONDS = 30.0


@router.get("/events")
async def stream_events():
    """Stream change events as SSE (`event: <name>`, `data: <payload>`)."""
    bus = get_state_manager().bus
    loop = asyncio.get_running_loop()
    queue: asyncio.Queue[ChangeEvent] = asyncio.Queue()

    # Commands run in the threadpool; hop back onto the event loop
    def on_event(event: ChangeEvent) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, event)

    async def event_generator():
        bus.on_any(on_event)
        logger.info("Event stream client connected")
        try:
            yield ": connected\n\n"
            while True:
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=KEEPALIVE_SECONDS)
                    yield f"event: {event.type.value}\ndata: {json.dumps(event.payload)}\n\n"
                except asyncio.TimeoutError:
                    yield ": keepalive\n\n"
        finally:
            bus.off_any(on_event)
            logger.info("Event stream client disconnected")

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
        },
    )
