"""
OpenAI-compatible chat completions client wrapper.
"""
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from core.config import (
    LLM_BASE_URL,
    LLM_API_KEY,
    LLM_MODEL,
    LLM_TIMEOUT_SECONDS,
    SUMMARY_TEMPERATURE,
    SUMMARY_TOP_P,
    SUMMARY_MAX_TOKENS,
)
from core.exceptions import RequestTimeoutError, UpstreamError

logger = logging.getLogger(__name__)

Message = Dict[str, str]


def user_message(content: str) -> List[Message]:
    return [{"role": "user", "content": content}]


def parse_stream_line(line: str) -> Optional[str]:
    """
    Parse one server-sent line of a streaming completion.

    Returns the delta text (possibly empty), or None for lines that carry no
    chunk (blank lines, comments, the ``[DONE]`` sentinel). An error payload
    sent mid-stream raises ``UpstreamError``.
    """
    line = line.strip()
    if not line.startswith("data:"):
        return None
    data = line[len("data:"):].strip()
    if not data or data == "[DONE]":
        return None

    chunk = json.loads(data)
    error = chunk.get("error")
    if error:
        message = error.get("message") if isinstance(error, dict) else str(error)
        raise UpstreamError(message or "AI service reported an error", error="AI service error")
    choices = chunk.get("choices") or []
    if not choices:
        return ""
    delta = choices[0].get("delta") or {}
    return delta.get("content") or ""


class LLMClient:
    """Client for an OpenAI-compatible completion service."""

    def __init__(
        self,
        base_url: str = LLM_BASE_URL,
        api_key: Optional[str] = LLM_API_KEY,
        model: str = LLM_MODEL,
        timeout: float = LLM_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            headers=headers,
            timeout=timeout,
            transport=transport,
        )

    def _payload(
        self,
        messages: List[Message],
        temperature: float,
        max_tokens: int,
        top_p: float,
        stream: bool,
    ) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": temperature,
            "top_p": top_p,
            "max_tokens": max_tokens,
            "stream": stream,
        }

    @staticmethod
    def _status_error(response: httpx.Response) -> UpstreamError:
        return UpstreamError(
            f"AI service returned HTTP {response.status_code}",
            error="AI service error",
            status_code=response.status_code,
        )

    async def complete(
        self,
        messages: List[Message],
        temperature: float = SUMMARY_TEMPERATURE,
        max_tokens: int = SUMMARY_MAX_TOKENS,
        top_p: float = SUMMARY_TOP_P,
    ) -> str:
        """Non-streaming completion; returns the raw message text."""
        payload = self._payload(messages, temperature, max_tokens, top_p, stream=False)
        try:
            response = await self.client.post("/chat/completions", json=payload)
        except httpx.TimeoutException:
            raise RequestTimeoutError("The AI service took too long to respond", error="AI service timeout")
        except httpx.RequestError as e:
            raise UpstreamError(f"AI service unreachable: {e}", error="AI service error")

        if response.status_code >= 400:
            logger.warning(f"Completion failed with HTTP {response.status_code}: {response.text[:200]}")
            raise self._status_error(response)

        result = response.json()
        choices = result.get("choices") or []
        if not choices:
            return ""
        return (choices[0].get("message") or {}).get("content") or ""

    async def open_stream(
        self,
        messages: List[Message],
        temperature: float = SUMMARY_TEMPERATURE,
        max_tokens: int = SUMMARY_MAX_TOKENS,
        top_p: float = SUMMARY_TOP_P,
    ) -> httpx.Response:
        """
        Start a streaming completion and return the open response.

        The status is checked here, before anything is sent downstream, so
        failures surface as ordinary exceptions. The caller owns the response
        and must close it (``iter_deltas`` does so when exhausted or closed).
        """
        payload = self._payload(messages, temperature, max_tokens, top_p, stream=True)
        request = self.client.build_request("POST", "/chat/completions", json=payload)
        try:
            response = await self.client.send(request, stream=True)
        except httpx.TimeoutException:
            raise RequestTimeoutError("The AI service took too long to respond", error="AI service timeout")
        except httpx.RequestError as e:
            raise UpstreamError(f"AI service unreachable: {e}", error="AI service error")

        if response.status_code >= 400:
            body = await response.aread()
            await response.aclose()
            logger.warning(f"Streaming completion failed with HTTP {response.status_code}: {body[:200]!r}")
            raise self._status_error(response)

        return response

    async def iter_deltas(self, response: httpx.Response) -> AsyncIterator[str]:
        """Yield delta text from an open streaming response, in arrival order."""
        try:
            async for line in response.aiter_lines():
                text = parse_stream_line(line)
                if text:
                    yield text
        except httpx.TimeoutException:
            raise RequestTimeoutError("The AI service stopped responding", error="AI service timeout")
        except httpx.HTTPError as e:
            raise UpstreamError(f"AI stream interrupted: {e}", error="AI service error")
        except json.JSONDecodeError as e:
            raise UpstreamError(f"Malformed chunk from AI service: {e}", error="AI service error")
        finally:
            await response.aclose()

    async def aclose(self) -> None:
        await self.client.aclose()


# Global LLM client instance
llm_client = LLMClient()
