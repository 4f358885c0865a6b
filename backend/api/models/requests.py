"""
Pydantic request models for API endpoints.
"""
from urllib.parse import urlparse
from pydantic import AfterValidator, BaseModel, Field, field_validator
from typing import Annotated, List, Optional

from core.config import CHAT_MAX_TOKENS, CHAT_TEMPERATURE, MAX_WORKSPACE_NAME_LENGTH
from models.content_models import NoteAction, SummaryStyle, VideoSummaryStyle


def _require_http_url(value: str) -> str:
    value = value.strip()
    parsed = urlparse(value)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ValueError("Please provide a valid HTTP/HTTPS URL")
    return value


HttpUrlStr = Annotated[str, Field(min_length=1), AfterValidator(_require_http_url)]


class ExtractRequest(BaseModel):
    """Request model for web content extraction."""
    url: HttpUrlStr = Field(..., description="HTTP(S) URL to extract")


class WebSummaryRequest(BaseModel):
    """Request model for streamed web summaries."""
    url: HttpUrlStr = Field(..., description="HTTP(S) URL to summarize")
    summary_type: SummaryStyle = Field(default=SummaryStyle.GENERAL, description="Summary style")


class VideoSummaryRequest(BaseModel):
    """Request model for YouTube video summaries."""
    videoUrl: str = Field(..., min_length=1, description="YouTube URL or 11-character video ID")
    summaryType: VideoSummaryStyle = Field(default=VideoSummaryStyle.CONCISE, description="Summary style")


class ChatRequest(BaseModel):
    """Request model for free-form chat."""
    prompt: str = Field(..., min_length=1, description="User prompt")
    temperature: float = Field(default=CHAT_TEMPERATURE, ge=0.0, le=2.0)
    max_tokens: int = Field(default=CHAT_MAX_TOKENS, ge=1, le=16384)

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt is required")
        return value


class GenerateNoteRequest(BaseModel):
    """Request model for note generation."""
    prompt: str = Field(..., min_length=1, description="What to write")
    context: str = Field(default="", description="Optional surrounding note content")
    action: NoteAction = Field(default=NoteAction.GENERATE)

    @field_validator("prompt")
    @classmethod
    def prompt_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Prompt is required")
        return value


class TextSummaryRequest(BaseModel):
    """Request model for summarizing caller-provided text."""
    content: str = Field(..., min_length=1, description="Text to summarize")
    summary_type: SummaryStyle = Field(default=SummaryStyle.GENERAL)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Content is required")
        return value


class NoteCreateRequest(BaseModel):
    """Request model for note creation."""
    title: Optional[str] = None
    content: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    links: List[str] = Field(default_factory=list)
    category: str = "general"


class NoteUpdateRequest(BaseModel):
    """Partial note update; only fields present in the body are changed."""
    title: Optional[str] = None
    content: Optional[str] = None
    tags: Optional[List[str]] = None
    links: Optional[List[str]] = None
    category: Optional[str] = None


class WorkspaceCreateRequest(BaseModel):
    """Request model for workspace creation."""
    name: str = Field(..., description="Workspace name")
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_valid(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Workspace name is required")
        if len(value) > MAX_WORKSPACE_NAME_LENGTH:
            raise ValueError(f"Workspace name must be {MAX_WORKSPACE_NAME_LENGTH} characters or less")
        return value


class WorkspaceUpdateRequest(BaseModel):
    """Partial workspace update."""
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    icon: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_valid(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        value = value.strip()
        if not value:
            raise ValueError("Workspace name cannot be empty")
        if len(value) > MAX_WORKSPACE_NAME_LENGTH:
            raise ValueError(f"Workspace name must be {MAX_WORKSPACE_NAME_LENGTH} characters or less")
        return value
