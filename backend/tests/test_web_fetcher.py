"""
Unit tests for page fetching.
"""
import httpx
import pytest

from core.exceptions import RequestTimeoutError, UpstreamError
from services.ingestion.web_fetcher import WebFetcher

URL = "https://example.com/article"


def fetcher_for(handler) -> WebFetcher:
    return WebFetcher(timeout=1, transport=httpx.MockTransport(handler))


class TestFetchHtml:

    @pytest.mark.asyncio
    async def test_returns_body(self):
        def handler(request):
            assert "Mozilla" in request.headers["user-agent"]
            return httpx.Response(200, text="<html><body>hello</body></html>")

        assert await fetcher_for(handler).fetch_html(URL) == "<html><body>hello</body></html>"

    @pytest.mark.asyncio
    async def test_follows_redirects(self):
        def handler(request):
            if request.url.path == "/old":
                return httpx.Response(301, headers={"location": "https://example.com/new"})
            return httpx.Response(200, text="moved here")

        assert await fetcher_for(handler).fetch_html("https://example.com/old") == "moved here"

    @pytest.mark.asyncio
    async def test_status_passed_through(self):
        fetcher = fetcher_for(lambda request: httpx.Response(404, text="missing"))

        with pytest.raises(UpstreamError) as exc_info:
            await fetcher.fetch_html(URL)

        assert exc_info.value.status_code == 404
        assert exc_info.value.error == "Failed to fetch content"
        assert exc_info.value.message == "HTTP 404: Not Found"

    @pytest.mark.asyncio
    async def test_timeout(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(RequestTimeoutError) as exc_info:
            await fetcher_for(handler).fetch_html(URL)

        assert exc_info.value.status_code == 408
        assert exc_info.value.error == "Request timeout"

    @pytest.mark.asyncio
    async def test_connection_failure(self):
        def handler(request):
            raise httpx.ConnectError("name resolution failed", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await fetcher_for(handler).fetch_html(URL)

        assert exc_info.value.status_code == 500
        assert exc_info.value.error == "Content extraction failed"
