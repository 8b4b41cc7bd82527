from __future__ import annotations

from slowapi import Limiter

from career_tools.core.config import settings
from career_tools.core.identity import client_key

# Coarse per-caller guard across the whole API; per-tool quotas live in quota.py.
# Keyed like the quotas so callers behind one CDN edge get separate buckets.
limiter = Limiter(
    key_func=client_key,
    default_limits=[settings.rate_limit],
    enabled=settings.rate_limit_enabled,
)
