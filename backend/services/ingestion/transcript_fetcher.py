"""
YouTube caption fetcher using youtube-transcript-api, with yt-dlp as a
fallback caption source.
"""
import html
import logging
import re
from typing import List, Optional

import requests
import yt_dlp
from youtube_transcript_api import (
    CouldNotRetrieveTranscript,
    NoTranscriptFound,
    TranscriptsDisabled,
    VideoUnavailable,
    YouTubeTranscriptApi,
)

from core.config import TRANSCRIPT_LANGUAGES
from core.exceptions import ErrorReason, NotFoundError, UpstreamError, ValidationError
from models.content_models import TranscriptSegment

logger = logging.getLogger(__name__)

# Tried in order; first match wins
VIDEO_ID_PATTERNS = [
    re.compile(r"youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([A-Za-z0-9_-]{11})"),
    re.compile(r"^([A-Za-z0-9_-]{11})$"),
]
DIRECT_ID_RE = VIDEO_ID_PATTERNS[-1]

VTT_TIMING_RE = re.compile(r"^\s*(\S+)\s+-->\s+(\S+)")
TAG_RE = re.compile(r"<[^>]+>")


def extract_video_id(url_or_id: str) -> str:
    """
    Extract an 11-character video ID from a YouTube URL or bare ID.

    Raises:
        ValidationError: when no recognized pattern matches
    """
    candidate = (url_or_id or "").strip()
    for pattern in VIDEO_ID_PATTERNS:
        match = pattern.search(candidate)
        if match:
            return match.group(1)
    raise ValidationError(
        "Please provide a valid YouTube video URL or video ID",
        error="Invalid YouTube URL",
        reason=ErrorReason.BAD_VIDEO_ID,
    )


def validate_video_id(video_id: str) -> str:
    """Accept only a bare 11-character video ID."""
    if not DIRECT_ID_RE.match(video_id or ""):
        raise ValidationError(
            "Please provide a valid 11-character YouTube video ID",
            error="Invalid video ID",
            reason=ErrorReason.BAD_VIDEO_ID,
        )
    return video_id


def flatten_transcript(segments: List[TranscriptSegment]) -> str:
    """Join segment texts in order."""
    return " ".join(seg.text for seg in segments).strip()


def transcript_duration(segments: List[TranscriptSegment]) -> float:
    """End time of the last segment, in seconds."""
    if not segments:
        return 0.0
    return round(segments[-1].end, 3)


def _parse_timestamp(value: str) -> float:
    """Parse ``HH:MM:SS.mmm`` or ``MM:SS.mmm`` into seconds."""
    seconds = 0.0
    for part in value.replace(",", ".").split(":"):
        seconds = seconds * 60 + float(part)
    return seconds


def parse_vtt(content: str) -> List[TranscriptSegment]:
    """Parse a WebVTT caption body into timed segments."""
    segments: List[TranscriptSegment] = []
    previous_text = None

    for block in re.split(r"\n\s*\n", content.replace("\r\n", "\n")):
        lines = block.strip().split("\n")
        timing_index = next((i for i, line in enumerate(lines) if "-->" in line), None)
        if timing_index is None:
            continue  # header, NOTE or STYLE block

        match = VTT_TIMING_RE.match(lines[timing_index])
        if not match:
            continue
        start = _parse_timestamp(match.group(1))
        end = _parse_timestamp(match.group(2))

        text = " ".join(TAG_RE.sub("", line).strip() for line in lines[timing_index + 1:])
        text = re.sub(r"\s+", " ", html.unescape(text)).strip()
        # Auto captions repeat the previous line while the next one rolls in
        if not text or text == previous_text:
            continue

        segments.append(TranscriptSegment(text=text, start=start, duration=max(end - start, 0.0)))
        previous_text = text

    return segments


class TranscriptFetcher:
    """Fetches caption tracks for YouTube videos."""

    def __init__(self, languages: Optional[List[str]] = None):
        self.languages = languages or TRANSCRIPT_LANGUAGES
        self.api = YouTubeTranscriptApi()

    def fetch_transcript(self, video_id: str) -> List[TranscriptSegment]:
        """
        Get the caption track for a video as ordered segments.

        Uses youtube-transcript-api first, falls back to yt-dlp captions.

        Raises:
            NotFoundError: the video has no caption track
            UpstreamError: captions could not be retrieved for another reason
        """
        try:
            fetched = self.api.fetch(video_id, languages=self.languages)
            segments = [
                TranscriptSegment(text=snippet.text, start=snippet.start, duration=snippet.duration)
                for snippet in fetched
                if snippet.text and snippet.text.strip()
            ]
        except (TranscriptsDisabled, NoTranscriptFound, VideoUnavailable) as e:
            logger.info(f"No caption track via transcript API for {video_id} ({type(e).__name__}), trying yt-dlp")
            segments = self._fetch_via_yt_dlp(video_id)
        except CouldNotRetrieveTranscript as e:
            logger.warning(f"Transcript retrieval failed for {video_id}: {type(e).__name__}")
            raise UpstreamError(
                f"Could not retrieve captions for video {video_id}",
                error="Transcript not available",
            )

        if not segments:
            raise NotFoundError(
                "This video does not have captions/subtitles. The video might be private, "
                "deleted, or has disabled captions.",
                error="Transcript not available",
                reason=ErrorReason.NO_CAPTIONS,
            )
        return segments

    def _fetch_via_yt_dlp(self, video_id: str) -> List[TranscriptSegment]:
        """Look up a subtitle or auto-caption track with yt-dlp and parse it."""
        url = f"https://www.youtube.com/watch?v={video_id}"
        ydl_opts = {
            "skip_download": True,
            "quiet": True,
            "no_warnings": True,
            "writesubtitles": True,
            "writeautomaticsub": True,
            "subtitleslangs": self.languages,
        }

        try:
            with yt_dlp.YoutubeDL(ydl_opts) as ydl:
                info = ydl.extract_info(url, download=False)
        except yt_dlp.utils.DownloadError as e:
            logger.info(f"yt-dlp could not load {video_id}: {e}")
            return []

        sub_url = self._pick_caption_url(info or {})
        if not sub_url:
            return []

        try:
            response = requests.get(sub_url, timeout=10)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"Caption download failed for {video_id}: {e}")
            raise UpstreamError(
                f"Could not download captions for video {video_id}",
                error="Transcript not available",
            )

        return parse_vtt(response.text)

    def _pick_caption_url(self, info: dict) -> Optional[str]:
        """Prefer manual subtitles over auto captions, and WebVTT over other formats."""
        subtitles = info.get("subtitles") or {}
        auto_captions = info.get("automatic_captions") or {}

        for lang in self.languages:
            tracks = subtitles.get(lang) or auto_captions.get(lang) or []
            vtt = [t for t in tracks if t.get("ext") == "vtt" and t.get("url")]
            if vtt:
                return vtt[0]["url"]
        return None


# Global transcript fetcher instance
transcript_fetcher = TranscriptFetcher()
