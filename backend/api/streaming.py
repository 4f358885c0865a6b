"""
Server-sent event transport for stream events.
"""
import json
import logging
from typing import AsyncIterator

from fastapi import Request
from fastapi.responses import StreamingResponse

from services.processing.stream_relay import StreamEvent

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


class StreamCounter:
    """Number of event streams currently being served by this process."""

    def __init__(self):
        self.active = 0
        self.total = 0


stream_counter = StreamCounter()


def sse_frame(event: StreamEvent) -> str:
    return f"data: {json.dumps(event.to_frame(), ensure_ascii=False)}\n\n"


def event_stream_response(events: AsyncIterator[StreamEvent], request: Request) -> StreamingResponse:
    """
    Drain an event generator into a text/event-stream response.

    Stops at client disconnect and always closes the generator, which
    aborts the upstream completion.
    """

    async def body() -> AsyncIterator[str]:
        stream_counter.active += 1
        stream_counter.total += 1
        try:
            async for event in events:
                if await request.is_disconnected():
                    logger.info(f"Client disconnected from {request.url.path}, closing stream")
                    break
                yield sse_frame(event)
        finally:
            stream_counter.active -= 1
            await events.aclose()

    return StreamingResponse(body(), media_type="text/event-stream", headers=SSE_HEADERS)
