"""System routes for the What To Cook API."""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from what_to_cook import __version__
from what_to_cook.config import config
from what_to_cook.infrastructure.database import SupabaseClient
from what_to_cook.infrastructure.rate_limit import QuotaPolicy, get_quota_policy

router = APIRouter(tags=["System"])


async def check_gemini_configuration() -> Dict[str, Any]:
    """Report whether a Gemini key is set. Makes no API call, so it costs no tokens."""
    if not config.gemini_api_key():
        return {"status": "unconfigured", "error": "GEMINI_API_KEY not set"}
    return {"status": "healthy", "model": config.gemini_model()}


async def check_supabase_connection() -> Dict[str, Any]:
    """Test Supabase connectivity. Returns dict with status and details."""
    try:
        client = SupabaseClient()
        if not client.is_configured():
            return {"status": "unconfigured", "error": "Supabase credentials not set"}

        supabase = client.client
        await asyncio.wait_for(
            asyncio.to_thread(lambda: supabase.table("recipes").select("id").limit(1).execute()),
            timeout=2.0,
        )

        return {"status": "healthy", "database": "connected"}
    except asyncio.TimeoutError:
        return {"status": "timeout", "error": "Request timed out after 2s"}
    except Exception as e:
        return {"status": "unavailable", "error": str(e)[:100]}


@router.get("/health")
async def health_check(policy: QuotaPolicy = Depends(get_quota_policy)):
    """Health check. Returns service status, version, quota settings and dependency health."""
    results = await asyncio.gather(
        check_gemini_configuration(), check_supabase_connection(), return_exceptions=True
    )

    gemini_health: Dict[str, Any]
    supabase_health: Dict[str, Any]

    # Handle exceptions from gather
    if isinstance(results[0], Exception):
        gemini_health = {"status": "error", "error": str(results[0])}
    else:
        gemini_health = results[0]  # type: ignore[assignment]

    if isinstance(results[1], Exception):
        supabase_health = {"status": "error", "error": str(results[1])}
    else:
        supabase_health = results[1]  # type: ignore[assignment]

    all_healthy = (
        gemini_health.get("status") == "healthy" and supabase_health.get("status") == "healthy"
    )

    return {
        "status": "healthy" if all_healthy else "degraded",
        "service": "what-to-cook",
        "version": __version__,
        "quota": {
            "max_requests": policy.max_requests,
            "window_seconds": policy.window_seconds,
        },
        "missing_config": config.get_missing_config(),
        "dependencies": {"gemini": gemini_health, "supabase": supabase_health},
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
