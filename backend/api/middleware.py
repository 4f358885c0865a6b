"""
Request gate: security headers, request monitoring, content validation and
admin key checks.
"""
import json
import logging
import re
import time
from datetime import date, timedelta
from typing import Dict, Optional

from fastapi import Header, Query, Request

from core import config
from core.exceptions import AppError, PayloadTooLargeError, UnauthorizedError, ValidationError

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
}

SUSPICIOUS_PATTERNS = [
    re.compile(r"javascript:", re.IGNORECASE),
    re.compile(r"<script", re.IGNORECASE),
    re.compile(r"eval\(", re.IGNORECASE),
    re.compile(r"document\.", re.IGNORECASE),
    re.compile(r"window\.", re.IGNORECASE),
]


class UsageTracker:
    """
    Per-client daily request counters.

    Process-wide and reset on restart; counts are reported by the monitoring
    endpoint and never enforced.
    """

    def __init__(self):
        self.daily: Dict[str, int] = {}
        self.current_day = date.today()

    @staticmethod
    def _key(identifier: str, day: Optional[date] = None) -> str:
        return f"{identifier}:{(day or date.today()).isoformat()}"

    def track(self, identifier: str, cost: int = 1) -> int:
        today = date.today()
        if today != self.current_day:
            self.current_day = today
            self.cleanup()
        key = self._key(identifier, today)
        self.daily[key] = self.daily.get(key, 0) + cost
        return self.daily[key]

    def get_usage(self, identifier: str) -> int:
        return self.daily.get(self._key(identifier), 0)

    def cleanup(self, keep_days: int = 2) -> int:
        """Drop counters older than ``keep_days``; returns how many were removed."""
        cutoff = (date.today() - timedelta(days=keep_days - 1)).isoformat()
        stale = [key for key in self.daily if key.rsplit(":", 1)[1] < cutoff]
        for key in stale:
            del self.daily[key]
        return len(stale)


usage_tracker = UsageTracker()


def client_identifier(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def security_headers(request: Request, call_next):
    response = await call_next(request)
    for name, value in SECURITY_HEADERS.items():
        response.headers.setdefault(name, value)
    return response


async def request_monitor(request: Request, call_next):
    """Log each request with its status and duration, and count it per client."""
    start = time.perf_counter()
    client = client_identifier(request)
    usage_tracker.track(client)
    logger.info(f"{request.method} {request.url.path} - IP: {client}")

    response = await call_next(request)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(f"Response: {response.status_code} - {request.method} {request.url.path} - Duration: {duration_ms:.0f}ms")
    return response


async def validate_content(request: Request) -> None:
    """
    Reject oversized bodies and bodies carrying script-injection patterns.

    Used as a router dependency so it runs before any handler code.
    """
    body = await request.body()
    if not body:
        return

    if len(body) > config.MAX_REQUEST_BODY_BYTES:
        raise PayloadTooLargeError(
            f"Request body exceeds {config.MAX_REQUEST_BODY_BYTES} bytes",
        )

    text = body.decode("utf-8", errors="replace")
    if "json" in request.headers.get("content-type", ""):
        try:
            # unescape \uXXXX sequences before matching
            text = json.dumps(json.loads(text), ensure_ascii=False)
        except ValueError:
            logger.debug("Body is not valid JSON, scanning raw text")
    for pattern in SUSPICIOUS_PATTERNS:
        if pattern.search(text):
            logger.warning(f"Suspicious content detected from {client_identifier(request)}: {text[:100]}")
            raise ValidationError(
                "Request contains potentially harmful content",
                error="Invalid content",
            )


async def require_admin_key(
    x_api_key: Optional[str] = Header(default=None),
    x_admin_key: Optional[str] = Header(default=None),
    api_key: Optional[str] = Query(default=None, alias="apiKey"),
) -> None:
    """Admin-only endpoints: the configured ADMIN_API_KEY must be presented."""
    if not config.ADMIN_API_KEY:
        raise AppError(
            "ADMIN_API_KEY environment variable required for monitoring endpoints",
            error="Admin API key not configured",
        )

    presented = x_api_key or x_admin_key or api_key
    if presented != config.ADMIN_API_KEY:
        raise UnauthorizedError(
            "Valid admin API key required for monitoring endpoints",
            error="Invalid admin API key",
        )
