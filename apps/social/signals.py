from __future__ import annotations

from django.db import transaction
from django.db.models.signals import post_delete
from django.dispatch import receiver

from .events import emit_friendship_event
from .models import Friendship


@receiver(post_delete, sender=Friendship)
def handle_friendship_deleted(sender, instance: Friendship, **kwargs) -> None:
    if not instance.is_confirmed:
        return
    user_ids = (instance.initiator_id, instance.friend_id)
    transaction.on_commit(lambda: emit_friendship_event("deleted", *user_ids))
