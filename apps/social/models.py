from __future__ import annotations

from django.db import models

from apps.core.models import BaseModel


class Friendship(BaseModel):
    """
    A friendship request from ``initiator`` to ``friend``. The pair counts as
    friends once ``is_confirmed`` is set.
    """

    initiator = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="friendships_initiated")
    friend = models.ForeignKey("users.User", on_delete=models.CASCADE, related_name="friendships_received")
    is_confirmed = models.BooleanField(default=False)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        unique_together = ("initiator", "friend")
        indexes = [
            models.Index(fields=["initiator", "is_confirmed"], name="social_friend_init_conf_idx"),
            models.Index(fields=["friend", "is_confirmed"], name="social_friend_friend_conf_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover - debug helper
        state = "confirmed" if self.is_confirmed else "pending"
        return f"Friendship<{self.initiator_id}->{self.friend_id} {state}>"
