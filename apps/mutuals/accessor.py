from __future__ import annotations

import logging
from typing import Optional, Set

from django.conf import settings
from django.core.cache import BaseCache, caches

from .providers import SocialGraphProvider

logger = logging.getLogger(__name__)


class FriendListAccessor:
    """
    Fetches a user's friend ids from the provider behind a short-lived cache.

    Provider failures are logged and reported as an empty friend set so a
    mutual friends lookup degrades to zero results instead of erroring.
    """

    key_prefix = "mutuals:friends"

    def __init__(
        self,
        provider: SocialGraphProvider,
        cache_alias: Optional[str] = None,
        ttl: Optional[int] = None,
    ) -> None:
        self.provider = provider
        self.cache_alias = cache_alias or getattr(settings, "MUTUALS_CACHE_ALIAS", "default")
        self.ttl = ttl if ttl is not None else getattr(settings, "MUTUALS_FRIEND_LIST_TTL", 3600)

    @property
    def cache(self) -> BaseCache:
        return caches[self.cache_alias]

    def make_key(self, user_id: int) -> str:
        return f"{self.key_prefix}:{user_id}"

    def get_friend_ids(self, user_id: int, use_cache: bool = True) -> Set[int]:
        if not user_id or user_id <= 0:
            return set()

        if use_cache:
            cached = self._read_cached(user_id)
            if cached is not None:
                return cached

        try:
            friend_ids = {int(friend_id) for friend_id in self.provider.get_friend_ids(user_id) or ()}
        except Exception as exc:
            logger.warning("friend list fetch failed user_id=%s error=%s", user_id, exc, exc_info=True)
            return set()
        friend_ids.discard(0)

        if use_cache:
            self._write_cached(user_id, friend_ids)
        return friend_ids

    def invalidate(self, user_id: int) -> None:
        try:
            self.cache.delete(self.make_key(user_id))
        except Exception as exc:
            logger.warning("friend list invalidation failed user_id=%s error=%s", user_id, exc)

    def _read_cached(self, user_id: int) -> Optional[Set[int]]:
        try:
            cached = self.cache.get(self.make_key(user_id))
        except Exception as exc:
            logger.warning("friend list cache read failed user_id=%s error=%s", user_id, exc)
            return None
        if isinstance(cached, (list, tuple, set, frozenset)):
            return {int(friend_id) for friend_id in cached}
        return None

    def _write_cached(self, user_id: int, friend_ids: Set[int]) -> None:
        try:
            self.cache.set(self.make_key(user_id), sorted(friend_ids), self.ttl)
        except Exception as exc:
            logger.warning("friend list cache write failed user_id=%s error=%s", user_id, exc)
