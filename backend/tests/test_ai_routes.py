"""
API tests for the AI, web summary and YouTube summary routes.
"""
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from core.exceptions import ErrorReason, NotFoundError, RequestTimeoutError, UpstreamError
from core.llm_client import LLMClient
from models.content_models import TranscriptSegment

VIDEO_ID = "dQw4w9WgXcQ"

ARTICLE_PAGE = """
<html><head><title>Volcano Guide</title></head>
<body>
  <nav>Menu</nav>
  <main>
    <p>Volcanoes form where magma from the mantle reaches the surface through weak points in the crust.</p>
    <p>Eruptions range from gentle lava flows to violent explosions, depending on gas content and viscosity.</p>
  </main>
</body></html>
"""


@pytest.fixture
def page_fetch():
    """Patch the pipeline's page fetcher to return ARTICLE_PAGE."""
    with patch("core.pipeline.web_fetcher") as fetcher:
        fetcher.fetch_html = AsyncMock(return_value=ARTICLE_PAGE)
        yield fetcher


@pytest.fixture
def captions():
    with patch("core.pipeline.transcript_fetcher") as fetcher:
        fetcher.fetch_transcript.return_value = [
            TranscriptSegment("Welcome to the channel.", 0.0, 2.0),
            TranscriptSegment("Today we bake sourdough bread.", 2.0, 3.5),
        ]
        yield fetcher


class TestChatStream:

    def test_frames_then_done(self, client, scripted_llm, sse_frames):
        scripted_llm.chunks = ["<think>joke plan</think>", "Why did", " the chicken"]

        response = client.post("/api/ai/chat", json={"prompt": "Tell me a joke", "temperature": 0.2})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        frames = sse_frames(response)
        assert frames[:3] == [
            {"content": "<think>joke plan</think>"},
            {"content": "Why did"},
            {"content": " the chicken"},
        ]
        assert frames[-1] == {"content": "", "finished": True, "fullResponse": "Why did the chicken"}
        assert scripted_llm.calls[0]["temperature"] == 0.2

    def test_upstream_status_before_stream_is_plain_error(self, client, scripted_llm):
        scripted_llm.open_error = UpstreamError("AI service returned HTTP 503", error="AI service error", status_code=503)

        response = client.post("/api/ai/chat", json={"prompt": "hi"})

        assert response.status_code == 503
        assert response.json() == {"error": "AI service error", "message": "AI service returned HTTP 503"}

    def test_failure_mid_stream_is_error_frame(self, client, scripted_llm, sse_frames):
        scripted_llm.chunks = ["partial"]
        scripted_llm.stream_error = UpstreamError("AI stream interrupted: reset")

        frames = sse_frames(client.post("/api/ai/chat", json={"prompt": "hi"}))

        assert frames == [
            {"content": "partial"},
            {"error": "AI service error", "message": "AI stream interrupted: reset"},
        ]

    def test_upstream_error_chunk_mid_stream(self, client, sse_frames):
        body = (
            'data: {"choices":[{"delta":{"content":"partial"}}]}\n\n'
            'data: {"error":{"message":"Internal model failure"}}\n\n'
            "data: [DONE]\n\n"
        )
        upstream = LLMClient(
            base_url="https://llm.test/v1",
            transport=httpx.MockTransport(lambda request: httpx.Response(200, text=body)),
        )

        with patch("core.pipeline.llm_client", upstream):
            frames = sse_frames(client.post("/api/ai/chat", json={"prompt": "hi"}))

        assert frames == [
            {"content": "partial"},
            {"error": "AI service error", "message": "Internal model failure"},
        ]

    def test_missing_prompt(self, client, scripted_llm):
        response = client.post("/api/ai/chat", json={"prompt": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"
        assert scripted_llm.calls == []


class TestGenerateNote:

    def test_context_and_action_reach_prompt(self, client, scripted_llm, sse_frames):
        scripted_llm.chunks = ["- point one"]

        response = client.post("/api/ai/generate-note", json={
            "prompt": "Summarize my lecture",
            "context": "Lecture on cell biology",
            "action": "summarize",
        })

        prompt = scripted_llm.calls[0]["messages"][0]["content"]
        assert "Context: Lecture on cell biology" in prompt
        assert "concise summaries" in prompt
        assert sse_frames(response)[-1]["fullResponse"] == "- point one"

    def test_unknown_action_rejected(self, client, scripted_llm):
        response = client.post("/api/ai/generate-note", json={"prompt": "x", "action": "translate"})
        assert response.status_code == 400

    def test_blank_prompt_rejected(self, client, scripted_llm):
        response = client.post("/api/ai/generate-note", json={"prompt": "  \n "})

        assert response.status_code == 400
        assert scripted_llm.calls == []


class TestTextSummary:

    def test_summary_is_cleaned(self, client, scripted_llm):
        scripted_llm.completion = "<think>hmm</think>Short summary."

        response = client.post("/api/ai/summarize", json={"content": "Long text to summarize", "summary_type": "brief"})

        assert response.status_code == 200
        assert response.json() == {
            "summary": "Short summary.",
            "original_length": 22,
            "summary_type": "brief",
            "truncated": False,
        }

    def test_blank_content_rejected(self, client, scripted_llm):
        response = client.post("/api/ai/summarize", json={"content": "   "})

        assert response.status_code == 400
        assert response.json()["error"] == "Invalid input"
        assert scripted_llm.calls == []


class TestWebSummary:

    def test_extract(self, client, page_fetch):
        response = client.post("/api/web-summary/extract", json={"url": "https://example.com/volcanoes"})

        body = response.json()
        assert response.status_code == 200
        assert body["success"] is True
        assert body["data"]["title"] == "Volcano Guide"
        assert body["data"]["url"] == "https://example.com/volcanoes"
        assert "Menu" not in body["data"]["content"]
        assert body["stats"]["contentLength"] == len(body["data"]["content"])

    def test_summary_stream(self, client, page_fetch, scripted_llm, sse_frames):
        scripted_llm.chunks = ["Volcanoes ", "erupt."]

        response = client.post("/api/web-summary/summarize", json={
            "url": "https://example.com/volcanoes",
            "summary_type": "bullet_points",
        })

        frames = sse_frames(response)
        assert frames[0]["status"] == "summarizing"
        assert frames[0]["title"] == "Volcano Guide"
        assert frames[1:3] == [{"content": "Volcanoes "}, {"content": "erupt."}]
        done = frames[-1]
        assert done["finished"] is True
        assert done["fullResponse"] == "Volcanoes erupt."
        assert done["metadata"]["summaryType"] == "bullet_points"
        assert done["metadata"]["truncated"] is False
        assert set(done["metadata"]) >= {"title", "url", "originalLength", "extractedAt", "completedAt"}

        prompt = scripted_llm.calls[0]["messages"][0]["content"]
        assert prompt.count("Title: Volcano Guide") == 1

    def test_empty_page_fails_before_stream(self, client, page_fetch, scripted_llm):
        page_fetch.fetch_html.return_value = "<html><body><script>render()</script></body></html>"

        response = client.post("/api/web-summary/summarize", json={"url": "https://example.com/app"})

        assert response.status_code == 400
        assert response.json()["reason"] == ErrorReason.EMPTY_CONTENT
        assert scripted_llm.calls == []

    def test_slow_site(self, client, page_fetch):
        page_fetch.fetch_html.side_effect = RequestTimeoutError("The website took too long to respond")

        response = client.post("/api/web-summary/extract", json={"url": "https://slow.example.com"})

        assert response.status_code == 408
        assert response.json()["error"] == "Request timeout"

    def test_site_status_passed_through(self, client, page_fetch):
        page_fetch.fetch_html.side_effect = UpstreamError(
            "HTTP 404: Not Found", error="Failed to fetch content", status_code=404,
        )

        response = client.post("/api/web-summary/extract", json={"url": "https://example.com/gone"})

        assert response.status_code == 404

    @pytest.mark.parametrize("url", ["", "ftp://example.com/file", "example.com"])
    def test_invalid_url(self, client, page_fetch, url):
        response = client.post("/api/web-summary/extract", json={"url": url})

        assert response.status_code == 400
        page_fetch.fetch_html.assert_not_called()

    def test_unknown_style(self, client, page_fetch):
        response = client.post("/api/web-summary/summarize", json={"url": "https://example.com", "summary_type": "haiku"})
        assert response.status_code == 400


class TestYouTubeSummary:

    def test_summary(self, client, captions, scripted_llm):
        scripted_llm.completion = "<think>outline</think>A sourdough tutorial."

        response = client.post("/api/youtube-summary/summarize", json={"videoUrl": f"https://youtu.be/{VIDEO_ID}"})

        body = response.json()
        assert response.status_code == 200
        assert body["videoId"] == VIDEO_ID
        assert body["summary"] == "A sourdough tutorial."
        assert body["summaryType"] == "concise"
        assert body["videoDuration"] == 5.5
        assert body["transcriptWordCount"] == 9
        assert body["fullTranscript"] == "Welcome to the channel. Today we bake sourdough bread."

        call = scripted_llm.calls[0]
        assert call["messages"][0]["role"] == "system"
        assert call["max_tokens"] == 300

    def test_empty_completion(self, client, captions, scripted_llm):
        scripted_llm.completion = "<think>only thoughts</think>"

        response = client.post("/api/youtube-summary/summarize", json={"videoUrl": VIDEO_ID, "summaryType": "detailed"})

        assert response.json()["summary"] == "No summary generated"

    def test_legacy_bullet_style(self, client, captions, scripted_llm):
        scripted_llm.completion = "- Bake bread"

        response = client.post("/api/youtube-summary/summarize", json={"videoUrl": VIDEO_ID, "summaryType": "bullet"})

        assert response.status_code == 200
        assert response.json()["summaryType"] == "bullet"
        call = scripted_llm.calls[0]
        assert "bullet-point summaries" in call["messages"][0]["content"]
        assert call["max_tokens"] == 800

    def test_unknown_video_style(self, client, captions):
        response = client.post("/api/youtube-summary/summarize", json={"videoUrl": VIDEO_ID, "summaryType": "haiku"})

        assert response.status_code == 400
        captions.fetch_transcript.assert_not_called()

    def test_bad_url(self, client, captions):
        response = client.post("/api/youtube-summary/summarize", json={"videoUrl": "not a url"})

        assert response.status_code == 400
        assert response.json()["reason"] == ErrorReason.BAD_VIDEO_ID
        captions.fetch_transcript.assert_not_called()

    def test_no_captions(self, client, captions):
        captions.fetch_transcript.side_effect = NotFoundError(
            "This video does not have captions", error="Transcript not available", reason=ErrorReason.NO_CAPTIONS,
        )

        response = client.post("/api/youtube-summary/summarize", json={"videoUrl": VIDEO_ID})

        assert response.status_code == 404
        assert response.json()["reason"] == ErrorReason.NO_CAPTIONS

    def test_transcript(self, client, captions):
        response = client.get(f"/api/youtube-summary/transcript/{VIDEO_ID}")

        body = response.json()
        assert response.status_code == 200
        assert body["segments"] == 2
        assert body["duration"] == 5.5
        assert body["transcript"].startswith("Welcome to the channel.")

    def test_transcript_bad_id(self, client, captions):
        response = client.get("/api/youtube-summary/transcript/short")
        assert response.status_code == 400
