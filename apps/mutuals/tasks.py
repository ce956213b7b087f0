from __future__ import annotations

import logging

from celery import shared_task

from .cache import MutualResultCache

logger = logging.getLogger(__name__)


@shared_task
def cleanup_expired_mutual_cache() -> int:
    deleted = MutualResultCache().cleanup_expired()
    logger.info("mutuals expired cache rows removed count=%s", deleted)
    return deleted
