"""
Web page extraction and summary routes.
"""
import logging

from fastapi import APIRouter, Request

from api.models.requests import ExtractRequest, WebSummaryRequest
from api.models.responses import ExtractedData, ExtractResponse, ExtractStats
from api.streaming import event_stream_response
from core.pipeline import pipeline
from services.processing.utils import utc_now_iso

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/extract", response_model=ExtractResponse)
async def extract(body: ExtractRequest):
    """Fetch a page and return its main text without summarizing it."""
    extracted = await pipeline.extract_url(body.url)
    return ExtractResponse(
        data=ExtractedData(**extracted.to_dict()),
        stats=ExtractStats(
            contentLength=len(extracted.body_text),
            extractedAt=utc_now_iso(),
        ),
    )


@router.post("/summarize")
async def summarize(body: WebSummaryRequest, request: Request):
    """
    Stream a summary of a web page.

    Fetch and extraction failures are returned as ordinary JSON errors;
    once the stream starts, failures arrive as an error event.
    """
    logger.info(f"Web summary request: {body.url} ({body.summary_type.value})")
    events = await pipeline.summarize_url_stream(body.url, body.summary_type)
    return event_stream_response(events, request)
