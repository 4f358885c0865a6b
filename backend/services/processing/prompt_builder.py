"""
Instruction text for the completion service.

Every builder here is a pure function of its arguments.
"""
from typing import Optional, Tuple, Union

from core.config import MAX_CONTENT_LENGTH
from models.content_models import ExtractedContent, NoteAction, SummaryStyle

TRUNCATION_MARKER = "...[content truncated]"

STYLE_INSTRUCTIONS = {
    SummaryStyle.BRIEF: "Provide a brief, concise summary (2-3 sentences) of the following content.",
    SummaryStyle.BULLET_POINTS: (
        "Summarize the following content in clear bullet points. "
        "Include the main topics, key insights, and important details."
    ),
    SummaryStyle.DETAILED: (
        "Provide a comprehensive, detailed summary of the following content. "
        "Organize it into sections covering the main topics, key points and important details, "
        "and finish with a conclusion."
    ),
    SummaryStyle.GENERAL: "Summarize the following content in a clear, organized manner.",
}

NOTE_ACTION_INSTRUCTIONS = {
    NoteAction.GENERATE: (
        "You are a helpful assistant for note-taking. "
        "Generate well-organized, informative notes based on the given prompt."
    ),
    NoteAction.EXPAND: (
        "You are a helpful assistant that expands and elaborates on ideas for note-taking. "
        "Provide detailed, well-structured content that builds upon the given prompt."
    ),
    NoteAction.SUMMARIZE: (
        "You are a helpful assistant that creates concise summaries for note-taking. "
        "Provide clear, bullet-pointed summaries of the given content."
    ),
}

VIDEO_SYSTEM_PROMPTS = {
    SummaryStyle.BRIEF: (
        "You are a helpful assistant that creates very concise summaries of video transcripts. "
        "Keep summaries to 2-3 sentences maximum."
    ),
    SummaryStyle.BULLET_POINTS: "You are a helpful assistant that creates concise bullet-point summaries of video transcripts.",
    SummaryStyle.DETAILED: (
        "You are a helpful assistant that creates detailed summaries of video transcripts. "
        "Break down the content into key sections with bullet points."
    ),
    SummaryStyle.GENERAL: "You are a helpful assistant that creates clear, organized summaries of video transcripts.",
}

VIDEO_MAX_TOKENS = {
    SummaryStyle.BRIEF: 300,
    SummaryStyle.BULLET_POINTS: 800,
    SummaryStyle.DETAILED: 1500,
    SummaryStyle.GENERAL: 1024,
}


def truncate_content(text: str, max_length: int = MAX_CONTENT_LENGTH) -> Tuple[str, bool]:
    """Cap text at ``max_length`` characters, appending a marker when cut."""
    if len(text) > max_length:
        return text[:max_length] + TRUNCATION_MARKER, True
    return text, False


def source_label_for(content: ExtractedContent) -> str:
    return f"Title: {content.title}\nURL: {content.source_url}"


def build_prompt(
    content: Union[ExtractedContent, str],
    style: SummaryStyle = SummaryStyle.GENERAL,
    source_label: Optional[str] = None,
    max_content_length: int = MAX_CONTENT_LENGTH,
) -> str:
    """
    Build the summarization prompt for a piece of content.

    Args:
        content: Extracted page or raw text
        style: Requested summary style
        source_label: Optional lines describing the source (title, URL, video)
        max_content_length: Characters of source text embedded before truncation

    Returns:
        Prompt text: style instruction, optional source label, then the
        (possibly truncated) source text.
    """
    if isinstance(content, ExtractedContent):
        text = content.body_text
        if source_label is None:
            source_label = source_label_for(content)
    else:
        text = content

    body, _ = truncate_content(text, max_content_length)
    parts = [STYLE_INSTRUCTIONS[SummaryStyle(style)]]
    if source_label:
        parts.append(source_label)
    parts.append(f"Content:\n{body}")
    return "\n\n".join(parts)


def build_note_prompt(prompt: str, context: str = "", action: NoteAction = NoteAction.GENERATE) -> str:
    """Prompt for note generation, expansion or summarization."""
    instruction = NOTE_ACTION_INSTRUCTIONS[NoteAction(action)]
    if context:
        return f"{instruction}\n\nContext: {context}\n\nTask: {prompt}"
    return f"{instruction}\n\nTask: {prompt}"


def video_system_prompt(style: SummaryStyle) -> str:
    return VIDEO_SYSTEM_PROMPTS[SummaryStyle(style)]


def video_max_tokens(style: SummaryStyle) -> int:
    return VIDEO_MAX_TOKENS[SummaryStyle(style)]
