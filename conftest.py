from __future__ import annotations

from typing import Dict, Iterable, Optional, Set

import pytest
from django.core.cache import caches


@pytest.fixture(autouse=True)
def _clear_caches():
    for cache in caches.all():
        cache.clear()
    yield
    for cache in caches.all():
        cache.clear()


class FakeGraphProvider:
    """In-memory social graph that counts calls per method."""

    def __init__(self, friends: Optional[Dict[int, Iterable[int]]] = None) -> None:
        self.friends: Dict[int, Set[int]] = {}
        self.private: Set[int] = set()
        self.roles: Dict[int, str] = {}
        self.missing_profiles: Set[int] = set()
        self.calls: Dict[str, int] = {}
        self.fail_friend_ids = False
        for user_id, friend_ids in (friends or {}).items():
            for friend_id in friend_ids:
                self.befriend(user_id, friend_id)

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def befriend(self, user_a: int, user_b: int) -> None:
        self.friends.setdefault(user_a, set()).add(user_b)
        self.friends.setdefault(user_b, set()).add(user_a)

    def unfriend(self, user_a: int, user_b: int) -> None:
        self.friends.get(user_a, set()).discard(user_b)
        self.friends.get(user_b, set()).discard(user_a)

    def get_friend_ids(self, user_id: int) -> Set[int]:
        self._count("get_friend_ids")
        if self.fail_friend_ids:
            raise RuntimeError("graph unavailable")
        return set(self.friends.get(user_id, set()))

    def get_user_display(self, user_id: int):
        self._count("get_user_display")
        if user_id in self.missing_profiles:
            return None
        return {
            "name": f"User {user_id}",
            "avatar_url": f"/avatars/{user_id}.png",
            "profile_url": f"/members/user{user_id}/",
        }

    def user_exists(self, user_id: int) -> bool:
        self._count("user_exists")
        return user_id in self.friends or user_id in self.roles

    def is_friend_list_private(self, user_id: int) -> bool:
        self._count("is_friend_list_private")
        return user_id in self.private

    def find_hidden_members(self, user_ids, *, exclude_roles=(), hide_private=False) -> Set[int]:
        self._count("find_hidden_members")
        hidden = set()
        for user_id in user_ids:
            if hide_private and user_id in self.private:
                hidden.add(user_id)
            if self.roles.get(user_id) in set(exclude_roles):
                hidden.add(user_id)
        return hidden


@pytest.fixture
def graph():
    return FakeGraphProvider()
