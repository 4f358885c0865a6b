"""
Relay of an incremental completion to the caller as stream events.
"""
import logging
from typing import Any, AsyncIterable, AsyncIterator, Dict, Iterable, Optional, Union

from core.exceptions import AppError
from models.content_models import DeltaEvent, DoneEvent, ErrorEvent, StatusEvent
from services.processing.utils import strip_think_blocks, utc_now_iso

logger = logging.getLogger(__name__)

StreamEvent = Union[StatusEvent, DeltaEvent, DoneEvent, ErrorEvent]


async def _close(chunks: AsyncIterable[str]) -> None:
    aclose = getattr(chunks, "aclose", None)
    if aclose is not None:
        await aclose()


async def relay_stream(
    chunks: AsyncIterable[str],
    metadata: Optional[Dict[str, Any]] = None,
    leading_events: Iterable[StatusEvent] = (),
    error_label: str = "AI service error",
) -> AsyncIterator[StreamEvent]:
    """
    Forward upstream text chunks as delta events, then one terminal event.

    Each non-empty chunk is emitted as soon as it arrives, in arrival order,
    and accumulated. When the upstream ends, think blocks are stripped from
    the accumulated text and a single done event carries the cleaned text
    and metadata. A failure mid-stream becomes a single error event instead.

    Closing this generator (caller disconnect) closes ``chunks``, which
    releases the upstream response.
    """
    buffer = []
    try:
        for event in leading_events:
            yield event
        async for text in chunks:
            if not text:
                continue
            buffer.append(text)
            yield DeltaEvent(text=text)
    except AppError as e:
        logger.warning(f"Stream failed after {len(buffer)} chunks: {e.message}")
        yield ErrorEvent(error=error_label, message=e.message)
        return
    except Exception as e:
        logger.exception("Unexpected failure while relaying stream")
        yield ErrorEvent(error=error_label, message=str(e) or type(e).__name__)
        return
    finally:
        await _close(chunks)

    final_metadata = None
    if metadata is not None:
        final_metadata = {**metadata, "completedAt": utc_now_iso()}
    yield DoneEvent(full_text=strip_think_blocks("".join(buffer)), metadata=final_metadata)
