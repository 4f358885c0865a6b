"""
Operational monitoring routes.
"""
import time

from fastapi import APIRouter, Depends, Request

from api.middleware import require_admin_key, usage_tracker
from api.streaming import stream_counter
from core import config
from services.processing.utils import utc_now_iso

router = APIRouter()

STARTED_AT = time.monotonic()


def uptime_seconds() -> float:
    return round(time.monotonic() - STARTED_AT, 3)


@router.get("/stats", dependencies=[Depends(require_admin_key)])
async def stats():
    """Process uptime, per-client daily usage and stream counts. Admin key required."""
    usage_tracker.cleanup()
    return {
        "timestamp": utc_now_iso(),
        "uptime": uptime_seconds(),
        "dailyUsage": dict(usage_tracker.daily),
        "activeStreams": stream_counter.active,
        "totalStreams": stream_counter.total,
        "environment": config.APP_ENV,
    }


@router.get("/security", dependencies=[Depends(require_admin_key)])
async def security(request: Request):
    """Report which deployment safeguards are configured. Admin key required."""
    forwarded_proto = request.headers.get("x-forwarded-proto", "")
    checks = {
        "corsConfigured": bool(config.ALLOWED_ORIGINS),
        "apiKeyConfigured": bool(config.CLIENT_API_KEY),
        "adminKeyConfigured": bool(config.ADMIN_API_KEY),
        "httpsOnly": request.url.scheme == "https" or forwarded_proto == "https",
    }

    recommendations = []
    if not checks["corsConfigured"]:
        recommendations.append("Configure ALLOWED_ORIGINS environment variable")
    if not checks["apiKeyConfigured"]:
        recommendations.append("Set CLIENT_API_KEY for API protection")
    if not checks["httpsOnly"]:
        recommendations.append("Enable HTTPS in production")

    return {
        "status": "secure" if all(checks.values()) else "warning",
        "checks": checks,
        "recommendations": recommendations,
    }
