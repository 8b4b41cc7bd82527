from __future__ import annotations

from fastapi import Request

from career_tools.core.config import settings

_PROXY_HEADERS = (
    "cf-connecting-ip",
    "x-client-ip",
    "x-real-ip",
    "x-forwarded-for",
)


def client_key(request: Request) -> str:
    """Opaque per-caller key used only for quota bucketing."""
    if settings.trust_proxy_headers:
        for header in _PROXY_HEADERS:
            value = request.headers.get(header, "").strip()
            if not value:
                continue
            # x-forwarded-for may carry a chain; the first hop is the caller.
            first = value.split(",")[0].strip()
            if first and first.lower() != "unknown":
                return first
    if request.client and request.client.host:
        return request.client.host
    return "unknown"
