"""Shared helpers for HTTP-based provider adapters."""
from __future__ import annotations

import time
from typing import Any, Dict, Mapping, Optional

import httpx

from ..errors import ProviderError

# Response bodies can echo audio metadata; keep error details short.
MAX_ERROR_BODY = 120


def raise_for_status(provider: str, response: httpx.Response, step: str = "request") -> None:
    """Raise :class:`ProviderError` for a non-2xx response.

    Args:
        provider: Provider name used as the error prefix
        response: Response to check
        step: Request step for the message (e.g. "upload", "poll")
    """
    if response.is_success:
        return
    body = response.text.strip().replace("\n", " ")[:MAX_ERROR_BODY]
    raise ProviderError(provider, f"{step} failed with HTTP {response.status_code}: {body}")


def build_health_result(
    healthy: bool, status: str, start_time: float, details: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """Build the health-check dictionary shared by all providers."""
    return {
        "healthy": healthy,
        "status": status,
        "response_time_ms": (time.time() - start_time) * 1000,
        "details": details or {},
    }


async def probe_endpoint(
    provider: str,
    url: str,
    timeout: float,
    headers: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    """Issue a short GET against ``url`` and report reachability.

    401/403 are reported as ``invalid_api_key``; any other non-2xx status as
    ``degraded``. Network errors and timeouts yield ``unreachable``.
    """
    start_time = time.time()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.get(url, headers=dict(headers or {}))
    except httpx.TimeoutException:
        return build_health_result(
            False, "timeout", start_time, {"provider": provider, "error": f"no response within {timeout}s"}
        )
    except httpx.HTTPError as e:
        return build_health_result(
            False,
            "unreachable",
            start_time,
            {"provider": provider, "error": str(e), "error_type": type(e).__name__},
        )

    details = {"provider": provider, "http_status": response.status_code}
    if response.is_success:
        return build_health_result(True, "operational", start_time, details)
    if response.status_code in (401, 403):
        return build_health_result(False, "invalid_api_key", start_time, details)
    return build_health_result(False, "degraded", start_time, details)
