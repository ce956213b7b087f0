from __future__ import annotations

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.users.models import User

from .events import emit_friendship_event
from .models import Friendship


class FriendshipError(ValueError):
    pass


def _pair_filter(user_a_id: int, user_b_id: int) -> Q:
    return Q(initiator_id=user_a_id, friend_id=user_b_id) | Q(initiator_id=user_b_id, friend_id=user_a_id)


def request_friendship(initiator: User, friend: User) -> Friendship:
    if initiator.pk == friend.pk:
        raise FriendshipError("Cannot befriend yourself.")
    existing = Friendship.objects.filter(_pair_filter(initiator.pk, friend.pk)).first()
    if existing:
        return existing
    return Friendship.objects.create(initiator=initiator, friend=friend)


def accept_friendship(friendship: Friendship) -> Friendship:
    if friendship.is_confirmed:
        return friendship
    friendship.is_confirmed = True
    friendship.confirmed_at = timezone.now()
    friendship.save(update_fields=["is_confirmed", "confirmed_at", "updated_at"])
    transaction.on_commit(
        lambda: emit_friendship_event("accepted", friendship.initiator_id, friendship.friend_id)
    )
    return friendship


def withdraw_friendship(initiator: User, friend: User) -> bool:
    """Cancel a pending request sent by ``initiator``."""
    pending = Friendship.objects.filter(initiator=initiator, friend=friend, is_confirmed=False).first()
    if pending is None:
        return False
    pending.delete()
    transaction.on_commit(lambda: emit_friendship_event("withdrawn", initiator.pk, friend.pk))
    return True


def remove_friendship(user: User, other: User) -> bool:
    """Delete a confirmed friendship; the post_delete receiver emits the event."""
    friendship = Friendship.objects.filter(_pair_filter(user.pk, other.pk), is_confirmed=True).first()
    if friendship is None:
        return False
    friendship.delete()
    return True


def friend_ids_for(user_id: int) -> set[int]:
    rows = Friendship.objects.filter(
        Q(initiator_id=user_id) | Q(friend_id=user_id),
        is_confirmed=True,
    ).values_list("initiator_id", "friend_id")
    return {friend_id if initiator_id == user_id else initiator_id for initiator_id, friend_id in rows}
