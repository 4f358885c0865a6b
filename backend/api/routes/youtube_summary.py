"""
YouTube transcript and summary routes.
"""
import logging

from fastapi import APIRouter

from api.models.requests import VideoSummaryRequest
from api.models.responses import TranscriptResponse, VideoSummaryResponse
from core.pipeline import pipeline

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/summarize", response_model=VideoSummaryResponse)
async def summarize(body: VideoSummaryRequest):
    """Summarize a video from its captions."""
    logger.info(f"Video summary request: {body.videoUrl} ({body.summaryType.value})")
    result = await pipeline.summarize_video(
        body.videoUrl,
        body.summaryType.to_summary_style(),
        body.summaryType.value,
    )
    return VideoSummaryResponse(**result)


@router.get("/transcript/{video_id}", response_model=TranscriptResponse)
async def get_transcript(video_id: str):
    return TranscriptResponse(**(await pipeline.get_transcript(video_id)))
