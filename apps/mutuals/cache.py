from __future__ import annotations

import logging
import uuid
from datetime import timedelta
from typing import Any, Dict, Optional

from django.conf import settings
from django.core.cache import BaseCache, caches
from django.db import DatabaseError, transaction
from django.db.models import Q
from django.utils import timezone

from .models import MutualCacheEntry

logger = logging.getLogger(__name__)


class MutualResultCache:
    """
    Two-tier cache of mutual friends payloads keyed by (viewer_id, target_id).

    Tier 1 is the Django cache. Its keys embed a generation token for the
    whole cache and for each participant, so bumping a token makes every
    older key unreachable; orphaned keys age out through their TTL.

    Tier 2 is ``MutualCacheEntry``. Per-user purges go through the
    ``viewer_id``/``target_id`` indexes and touch only the affected rows.

    Failures in either tier are logged and treated as a miss.
    """

    key_prefix = "mutuals:pair"
    generation_prefix = "mutuals:gen"
    ALL = "all"

    def __init__(self, cache_alias: Optional[str] = None, ttl: int = 3600) -> None:
        self.cache_alias = cache_alias or getattr(settings, "MUTUALS_CACHE_ALIAS", "default")
        self.ttl = ttl

    @property
    def cache(self) -> BaseCache:
        return caches[self.cache_alias]

    def _generation_key(self, scope: object) -> str:
        return f"{self.generation_prefix}:{scope}"

    def make_key(self, viewer_id: int, target_id: int) -> str:
        scopes = [self.ALL, viewer_id, target_id]
        stored = self.cache.get_many([self._generation_key(scope) for scope in scopes])
        tokens = []
        for scope in scopes:
            token = stored.get(self._generation_key(scope))
            if token is None:
                token = self._ensure_generation(scope)
            tokens.append(str(token))
        return f"{self.key_prefix}:{viewer_id}:{target_id}:{'.'.join(tokens)}"

    def _ensure_generation(self, scope: object) -> str:
        # absent generations get a new token, never a default
        key = self._generation_key(scope)
        fresh = self._new_token()
        self.cache.add(key, fresh, None)
        return self.cache.get(key) or fresh

    @staticmethod
    def _new_token() -> str:
        return uuid.uuid4().hex[:12]

    def get(self, viewer_id: int, target_id: int) -> Optional[Dict[str, Any]]:
        if not viewer_id or not target_id:
            return None

        key: Optional[str] = None
        try:
            key = self.make_key(viewer_id, target_id)
            data = self.cache.get(key)
        except Exception as exc:
            logger.warning("mutuals tier1 read failed viewer=%s target=%s error=%s", viewer_id, target_id, exc)
            data = None
        if isinstance(data, dict):
            return data

        entry = self._read_durable(viewer_id, target_id)
        if entry is None:
            return None

        remaining = int((entry.expires_at - timezone.now()).total_seconds())
        if key and remaining > 0:
            try:
                self.cache.set(key, entry.payload, remaining)
            except Exception as exc:
                logger.warning("mutuals tier1 backfill failed key=%s error=%s", key, exc)
        return entry.payload

    def set(self, viewer_id: int, target_id: int, payload: Dict[str, Any], ttl: Optional[int] = None) -> bool:
        if not viewer_id or not target_id:
            return False
        ttl = ttl or self.ttl
        expires_at = timezone.now() + timedelta(seconds=ttl)

        try:
            self.cache.set(self.make_key(viewer_id, target_id), payload, ttl)
        except Exception as exc:
            logger.warning("mutuals tier1 write failed viewer=%s target=%s error=%s", viewer_id, target_id, exc)

        try:
            with transaction.atomic():
                MutualCacheEntry.objects.update_or_create(
                    viewer_id=viewer_id,
                    target_id=target_id,
                    defaults={"payload": payload, "expires_at": expires_at},
                )
        except DatabaseError as exc:
            logger.warning("mutuals tier2 write failed viewer=%s target=%s error=%s", viewer_id, target_id, exc)
            return False
        return True

    def invalidate_for_user(self, user_id: int) -> int:
        if not user_id:
            return 0
        self._bump_generation(user_id)
        try:
            with transaction.atomic():
                deleted, _ = MutualCacheEntry.objects.filter(Q(viewer_id=user_id) | Q(target_id=user_id)).delete()
        except DatabaseError as exc:
            logger.warning("mutuals tier2 invalidation failed user_id=%s error=%s", user_id, exc)
            return 0
        logger.info("mutuals cache invalidated user_id=%s rows=%s", user_id, deleted)
        return deleted

    def clear_all(self) -> int:
        self._bump_generation(self.ALL)
        try:
            with transaction.atomic():
                deleted, _ = MutualCacheEntry.objects.all().delete()
        except DatabaseError as exc:
            logger.warning("mutuals tier2 clear failed error=%s", exc)
            return 0
        logger.info("mutuals cache cleared rows=%s", deleted)
        return deleted

    def cleanup_expired(self) -> int:
        try:
            with transaction.atomic():
                deleted, _ = MutualCacheEntry.objects.filter(expires_at__lte=timezone.now()).delete()
        except DatabaseError as exc:
            logger.warning("mutuals tier2 cleanup failed error=%s", exc)
            return 0
        return deleted

    def _bump_generation(self, scope: object) -> None:
        try:
            self.cache.set(self._generation_key(scope), self._new_token(), None)
        except Exception as exc:
            logger.warning("mutuals generation bump failed scope=%s error=%s", scope, exc)

    def _read_durable(self, viewer_id: int, target_id: int) -> Optional[MutualCacheEntry]:
        try:
            return MutualCacheEntry.objects.filter(
                viewer_id=viewer_id,
                target_id=target_id,
                expires_at__gt=timezone.now(),
            ).first()
        except DatabaseError as exc:
            logger.warning("mutuals tier2 read failed viewer=%s target=%s error=%s", viewer_id, target_id, exc)
            return None
