from __future__ import annotations

from django.db import models
from django.utils import timezone

from apps.core.models import BaseModel


class MutualCacheEntry(BaseModel):
    """
    Durable tier of the mutual friends result cache, keyed by the ordered
    (viewer, target) pair. Rows are replaced wholesale, never patched.
    """

    viewer_id = models.BigIntegerField(db_index=True)
    target_id = models.BigIntegerField(db_index=True)
    payload = models.JSONField(default=dict)
    expires_at = models.DateTimeField(db_index=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["viewer_id", "target_id"], name="mutuals_unique_pair"),
        ]

    def __str__(self) -> str:  # pragma: no cover - debug helper
        return f"MutualCacheEntry<{self.viewer_id}:{self.target_id}>"

    @property
    def is_expired(self) -> bool:
        return self.expires_at <= timezone.now()
