"""
Pipeline orchestration for extraction, transcripts and AI summaries.

Stages: fetch source (page or captions) -> extract text -> build prompt ->
completion (streamed or single-shot) -> strip think blocks.

Streaming methods are coroutines that return an event generator. Everything
that can fail before the first byte is sent (validation, fetching,
extraction, opening the completion) happens while awaiting the coroutine,
so those failures become ordinary HTTP errors. Only failures inside the
returned generator are reported in-band.
"""
import logging
from typing import Any, AsyncIterator, Dict

from fastapi.concurrency import run_in_threadpool

from core.config import (
    CHAT_TOP_P,
    MAX_CONTENT_LENGTH,
    MIN_TRANSCRIPT_LENGTH,
    NOTE_MAX_TOKENS,
    NOTE_TEMPERATURE,
    NOTE_TOP_P,
    SUMMARY_MAX_TOKENS,
    SUMMARY_TEMPERATURE,
    SUMMARY_TOP_P,
    TEXT_SUMMARY_MAX_TOKENS,
    TRANSCRIPT_PREVIEW_CHARS,
)
from core.exceptions import ErrorReason, NotFoundError
from core.llm_client import llm_client, user_message
from models.content_models import ExtractedContent, NoteAction, StatusEvent, SummaryRequest, SummaryStyle
from services.ingestion.content_extractor import content_extractor
from services.ingestion.transcript_fetcher import (
    extract_video_id,
    flatten_transcript,
    transcript_duration,
    transcript_fetcher,
    validate_video_id,
)
from services.ingestion.web_fetcher import web_fetcher
from services.processing.prompt_builder import (
    build_note_prompt,
    build_prompt,
    truncate_content,
    video_max_tokens,
    video_system_prompt,
)
from services.processing.stream_relay import StreamEvent, relay_stream
from services.processing.utils import preview, strip_think_blocks, utc_now_iso, word_count

logger = logging.getLogger(__name__)


class ContentPipeline:
    """Orchestrates the content -> prompt -> completion flow for each endpoint."""

    async def extract_url(self, url: str) -> ExtractedContent:
        """Fetch a page and isolate its main text."""
        html = await web_fetcher.fetch_html(url)
        extracted = content_extractor.extract(html, url)
        logger.info(f"Extracted {len(extracted.body_text)} chars from {url}")
        return extracted

    async def summarize_url_stream(
        self,
        url: str,
        style: SummaryStyle = SummaryStyle.GENERAL,
    ) -> AsyncIterator[StreamEvent]:
        """Extract a page and stream its summary."""
        extracted = await self.extract_url(url)
        extracted_at = utc_now_iso()

        request = SummaryRequest(
            source_text=extracted.body_text,
            style=style,
            source_metadata={"title": extracted.title, "url": extracted.source_url},
        )
        _, truncated = truncate_content(request.source_text, MAX_CONTENT_LENGTH)
        prompt = build_prompt(extracted, request.style)

        response = await llm_client.open_stream(
            user_message(prompt),
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=SUMMARY_MAX_TOKENS,
            top_p=SUMMARY_TOP_P,
        )

        metadata = {
            **request.source_metadata,
            "originalLength": len(request.source_text),
            "summaryType": request.style.value,
            "truncated": truncated,
            "extractedAt": extracted_at,
        }
        summarizing = StatusEvent(
            status="summarizing",
            message="Generating AI summary...",
            extra={"title": extracted.title},
        )
        return relay_stream(
            llm_client.iter_deltas(response),
            metadata=metadata,
            leading_events=[summarizing],
            error_label="Web summarization failed",
        )

    async def chat_stream(self, prompt: str, temperature: float, max_tokens: int) -> AsyncIterator[StreamEvent]:
        """Stream a free-form chat completion."""
        response = await llm_client.open_stream(
            user_message(prompt),
            temperature=temperature,
            max_tokens=max_tokens,
            top_p=CHAT_TOP_P,
        )
        return relay_stream(llm_client.iter_deltas(response), error_label="AI service error")

    async def generate_note_stream(
        self,
        prompt: str,
        context: str = "",
        action: NoteAction = NoteAction.GENERATE,
    ) -> AsyncIterator[StreamEvent]:
        """Stream generated, expanded or summarized note content."""
        response = await llm_client.open_stream(
            user_message(build_note_prompt(prompt, context, action)),
            temperature=NOTE_TEMPERATURE,
            max_tokens=NOTE_MAX_TOKENS,
            top_p=NOTE_TOP_P,
        )
        return relay_stream(llm_client.iter_deltas(response), error_label="Note generation failed")

    async def summarize_text(self, content: str, style: SummaryStyle = SummaryStyle.GENERAL) -> Dict[str, Any]:
        """Single-shot summary of caller-provided text."""
        _, truncated = truncate_content(content, MAX_CONTENT_LENGTH)
        raw = await llm_client.complete(
            user_message(build_prompt(content, style)),
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=TEXT_SUMMARY_MAX_TOKENS,
            top_p=SUMMARY_TOP_P,
        )
        return {
            "summary": strip_think_blocks(raw),
            "original_length": len(content),
            "summary_type": style.value,
            "truncated": truncated,
        }

    async def get_transcript(self, video_id: str) -> Dict[str, Any]:
        """Fetch and flatten the caption track of a video."""
        video_id = validate_video_id(video_id)
        segments = await run_in_threadpool(transcript_fetcher.fetch_transcript, video_id)
        transcript = flatten_transcript(segments)
        return {
            "success": True,
            "videoId": video_id,
            "transcript": transcript,
            "wordCount": word_count(transcript),
            "duration": transcript_duration(segments),
            "segments": len(segments),
        }

    async def summarize_video(self, video_url: str, style: SummaryStyle, requested_type: str) -> Dict[str, Any]:
        """Fetch a video's captions and summarize them in one completion."""
        video_id = extract_video_id(video_url)
        segments = await run_in_threadpool(transcript_fetcher.fetch_transcript, video_id)
        transcript = flatten_transcript(segments)

        if len(transcript) < MIN_TRANSCRIPT_LENGTH:
            raise NotFoundError(
                "This video does not have captions/subtitles available",
                error="No transcript available",
                reason=ErrorReason.NO_CAPTIONS,
            )

        prompt = build_prompt(transcript, style, source_label=f"YouTube video: {video_id}")
        raw = await llm_client.complete(
            [
                {"role": "system", "content": video_system_prompt(style)},
                {"role": "user", "content": prompt},
            ],
            temperature=SUMMARY_TEMPERATURE,
            max_tokens=video_max_tokens(style),
            top_p=SUMMARY_TOP_P,
        )

        return {
            "success": True,
            "videoId": video_id,
            "summary": strip_think_blocks(raw) or "No summary generated",
            "summaryType": requested_type,
            "transcriptLength": len(transcript),
            "transcriptWordCount": word_count(transcript),
            "videoDuration": transcript_duration(segments),
            "fullTranscript": preview(transcript, TRANSCRIPT_PREVIEW_CHARS),
        }


# Global pipeline instance
pipeline = ContentPipeline()
