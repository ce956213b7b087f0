from __future__ import annotations

from typing import Dict, Iterable, Optional, Protocol, Set

from django.conf import settings
from django.db.models import Q

from apps.social.services import friend_ids_for
from apps.users.models import User, UserSettings


class SocialGraphProvider(Protocol):
    """
    The system of record for identities and friendships.
    """

    def get_friend_ids(self, user_id: int) -> Set[int]: ...

    def get_user_display(self, user_id: int) -> Optional[Dict[str, str]]: ...

    def user_exists(self, user_id: int) -> bool: ...

    def is_friend_list_private(self, user_id: int) -> bool: ...

    def find_hidden_members(
        self,
        user_ids: Iterable[int],
        *,
        exclude_roles: Iterable[str] = (),
        hide_private: bool = False,
    ) -> Set[int]: ...


class DjangoSocialGraphProvider:
    """Reads the social graph from the ``users`` and ``social`` apps."""

    def get_friend_ids(self, user_id: int) -> Set[int]:
        return friend_ids_for(user_id)

    def get_user_display(self, user_id: int) -> Optional[Dict[str, str]]:
        user = User.objects.filter(pk=user_id, is_active=True).only("id", "handle", "name", "photo").first()
        if user is None:
            return None
        template = getattr(settings, "MUTUALS_PROFILE_URL_TEMPLATE", "/members/{handle}/")
        return {
            "name": user.display_name,
            "avatar_url": user.photo or getattr(settings, "MUTUALS_DEFAULT_AVATAR_URL", ""),
            "profile_url": template.format(handle=user.handle, id=user.pk),
        }

    def user_exists(self, user_id: int) -> bool:
        return User.objects.filter(pk=user_id, is_active=True).exists()

    def is_friend_list_private(self, user_id: int) -> bool:
        return UserSettings.objects.filter(
            user_id=user_id,
            friends_privacy=UserSettings.FriendsPrivacy.PRIVATE,
        ).exists()

    def find_hidden_members(
        self,
        user_ids: Iterable[int],
        *,
        exclude_roles: Iterable[str] = (),
        hide_private: bool = False,
    ) -> Set[int]:
        ids = list(user_ids)
        roles = [role for role in exclude_roles if role]
        if not ids or (not roles and not hide_private):
            return set()
        condition = Q()
        if hide_private:
            condition |= Q(friends_privacy=UserSettings.FriendsPrivacy.PRIVATE)
        if roles:
            condition |= Q(role__in=roles)
        return set(
            UserSettings.objects.filter(condition, user_id__in=ids).values_list("user_id", flat=True)
        )
