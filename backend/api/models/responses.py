"""
Pydantic response models for API endpoints.
"""
from pydantic import BaseModel, Field
from typing import List, Optional, Dict, Any


class ErrorResponse(BaseModel):
    """Shape of every error body."""
    error: str
    message: str
    reason: Optional[str] = None


class ExtractedData(BaseModel):
    content: str
    title: str
    url: str


class ExtractStats(BaseModel):
    contentLength: int
    extractedAt: str


class ExtractResponse(BaseModel):
    """Response model for web content extraction."""
    success: bool = True
    data: ExtractedData
    stats: ExtractStats


class VideoSummaryResponse(BaseModel):
    """Response model for YouTube video summaries."""
    success: bool = True
    videoId: str
    summary: str
    summaryType: str
    transcriptLength: int
    transcriptWordCount: int
    videoDuration: float = Field(..., description="Seconds, end of the last caption segment")
    fullTranscript: str = Field(..., description="Start of the transcript")


class TranscriptResponse(BaseModel):
    """Response model for raw transcripts."""
    success: bool = True
    videoId: str
    transcript: str
    wordCount: int
    duration: float
    segments: int = Field(..., description="Number of caption segments")


class TextSummaryResponse(BaseModel):
    """Response model for text summaries."""
    summary: str
    original_length: int
    summary_type: str
    truncated: bool


class NoteResponse(BaseModel):
    success: bool = True
    note: Dict[str, Any]


class NoteListResponse(BaseModel):
    success: bool = True
    notes: List[Dict[str, Any]]
    count: int


class NoteSearchResponse(NoteListResponse):
    searchQuery: Dict[str, Any]


class WorkspaceResponse(BaseModel):
    success: bool = True
    message: Optional[str] = None
    workspace: Dict[str, Any]


class WorkspaceListResponse(BaseModel):
    success: bool = True
    workspaces: List[Dict[str, Any]]
    count: int


class DeleteResponse(BaseModel):
    success: bool = True
    message: str
    workspaceId: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    uptime: Optional[float] = None
    message: Optional[str] = None
    timestamp: str
