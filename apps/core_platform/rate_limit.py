from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import caches

logger = logging.getLogger(__name__)


def is_rate_limited(key: str, limit: int, window_seconds: int, cache_alias: str = "default") -> bool:
    """
    Fixed-window counter. The first hit opens the window with ``add`` so the
    counter expires with it; later hits ``incr`` atomically on backends that
    support it. Cache errors fail open.
    """
    if not getattr(settings, "RATE_LIMITS_ENABLED", False):
        return False
    if limit <= 0 or window_seconds <= 0:
        return False

    cache = caches[cache_alias]
    cache_key = f"rl:{key}"
    try:
        if cache.add(cache_key, 1, timeout=window_seconds):
            return False
        current = cache.incr(cache_key)
    except ValueError:
        # window expired between add and incr
        try:
            cache.set(cache_key, 1, timeout=window_seconds)
        except Exception as exc:
            logger.warning("rate limit reset failed key=%s error=%s", cache_key, exc)
        return False
    except Exception as exc:
        logger.warning("rate limit check failed key=%s error=%s", cache_key, exc)
        return False

    return current > limit


class RateLimiter:
    def __init__(self, scope: str, limit: int, window_seconds: int, cache_alias: str = "default") -> None:
        self.scope = scope
        self.limit = limit
        self.window_seconds = window_seconds
        self.cache_alias = cache_alias

    def hit(self, ident: object) -> bool:
        """Count one request for ``ident``; True when it is over the limit."""
        return is_rate_limited(f"{self.scope}:{ident}", self.limit, self.window_seconds, self.cache_alias)
