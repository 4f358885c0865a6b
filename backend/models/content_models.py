"""
Data models for extracted content, transcripts and stream events.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, Optional


class SummaryStyle(str, Enum):
    """Requested output style for a summary."""
    GENERAL = "general"
    BRIEF = "brief"
    BULLET_POINTS = "bullet_points"
    DETAILED = "detailed"


class VideoSummaryStyle(str, Enum):
    """Styles accepted by the video endpoint, including legacy mobile values."""
    GENERAL = "general"
    BRIEF = "brief"
    BULLET_POINTS = "bullet_points"
    DETAILED = "detailed"
    CONCISE = "concise"
    BULLET = "bullet"

    def to_summary_style(self) -> SummaryStyle:
        aliases = {
            VideoSummaryStyle.CONCISE: SummaryStyle.BRIEF,
            VideoSummaryStyle.BULLET: SummaryStyle.BULLET_POINTS,
        }
        if self in aliases:
            return aliases[self]
        return SummaryStyle(self.value)


class NoteAction(str, Enum):
    GENERATE = "generate"
    EXPAND = "expand"
    SUMMARIZE = "summarize"


@dataclass
class ExtractedContent:
    """Main text isolated from a fetched page."""
    source_url: str
    title: str
    body_text: str  # plain text, whitespace collapsed

    def to_dict(self) -> Dict[str, str]:
        return {"content": self.body_text, "title": self.title, "url": self.source_url}


@dataclass
class TranscriptSegment:
    """Individual timed caption segment."""
    text: str
    start: float = 0.0  # seconds
    duration: float = 0.0  # seconds

    @property
    def end(self) -> float:
        return self.start + self.duration


@dataclass
class SummaryRequest:
    """Source text plus the style it should be summarized in."""
    source_text: str
    style: SummaryStyle = SummaryStyle.GENERAL
    source_metadata: Dict[str, Any] = field(default_factory=dict)


# Stream events. A stream is zero or more status events, zero or more
# deltas, then exactly one terminal event (done or error).

@dataclass
class StatusEvent:
    kind: ClassVar[str] = "status"
    status: str
    message: str
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_frame(self) -> Dict[str, Any]:
        return {"status": self.status, "message": self.message, **self.extra}


@dataclass
class DeltaEvent:
    kind: ClassVar[str] = "delta"
    text: str

    def to_frame(self) -> Dict[str, Any]:
        return {"content": self.text}


@dataclass
class DoneEvent:
    kind: ClassVar[str] = "done"
    full_text: str
    metadata: Optional[Dict[str, Any]] = None

    def to_frame(self) -> Dict[str, Any]:
        frame = {"content": "", "finished": True, "fullResponse": self.full_text}
        if self.metadata is not None:
            frame["metadata"] = self.metadata
        return frame


@dataclass
class ErrorEvent:
    kind: ClassVar[str] = "error"
    error: str
    message: str

    def to_frame(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


TERMINAL_KINDS = ("done", "error")


@dataclass
class CallerIdentity:
    """Authenticated caller as reported by the token verifier."""
    uid: str
    email: Optional[str] = None
    claims: Dict[str, Any] = field(default_factory=dict)
