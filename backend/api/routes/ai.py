"""
AI chat, note generation and text summary routes.
"""
import logging

from fastapi import APIRouter, Request

from api.models.requests import ChatRequest, GenerateNoteRequest, TextSummaryRequest
from api.models.responses import TextSummaryResponse
from api.streaming import event_stream_response
from core.pipeline import pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/chat")
async def chat(body: ChatRequest, request: Request):
    """Stream a chat completion as server-sent events."""
    logger.info(f"Chat request ({len(body.prompt)} chars)")
    events = await pipeline.chat_stream(body.prompt, body.temperature, body.max_tokens)
    return event_stream_response(events, request)


@router.post("/generate-note")
async def generate_note(body: GenerateNoteRequest, request: Request):
    """Stream generated, expanded or summarized note content."""
    logger.info(f"Note generation request: {body.action.value}")
    events = await pipeline.generate_note_stream(body.prompt, body.context, body.action)
    return event_stream_response(events, request)


@router.post("/summarize", response_model=TextSummaryResponse)
async def summarize(body: TextSummaryRequest):
    result = await pipeline.summarize_text(body.content, body.summary_type)
    return TextSummaryResponse(**result)
