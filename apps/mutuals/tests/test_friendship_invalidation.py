from __future__ import annotations

from django.test import TransactionTestCase
from rest_framework.test import APIClient

from apps.mutuals.models import MutualCacheEntry
from apps.social.services import accept_friendship, remove_friendship, request_friendship
from apps.users.models import User


class FriendshipInvalidationTests(TransactionTestCase):
    reset_sequences = True

    def setUp(self) -> None:
        self.viewer = User.objects.create_user(email="v@example.com", password="pass1234", handle="v")
        self.target = User.objects.create_user(email="t@example.com", password="pass1234", handle="t")
        self.first = User.objects.create_user(email="f@example.com", password="pass1234", handle="f")
        self.second = User.objects.create_user(email="s@example.com", password="pass1234", handle="s")
        for user in (self.viewer, self.target):
            accept_friendship(request_friendship(user, self.first))
        self.client = APIClient()
        self.client.force_authenticate(user=self.viewer)

    def count(self) -> int:
        response = self.client.post("/api/v1/mutuals/", {"target_user_id": self.target.id}, format="json")
        self.assertEqual(response.status_code, 200)
        return response.json()["count"]

    def test_accepting_friendship_refreshes_cached_result(self) -> None:
        self.assertEqual(self.count(), 1)
        self.assertEqual(MutualCacheEntry.objects.count(), 1)

        accept_friendship(request_friendship(self.viewer, self.second))
        accept_friendship(request_friendship(self.second, self.target))

        self.assertEqual(MutualCacheEntry.objects.count(), 0)
        self.assertEqual(self.count(), 2)

    def test_removing_friendship_refreshes_cached_result(self) -> None:
        self.assertEqual(self.count(), 1)

        remove_friendship(self.target, self.first)

        self.assertEqual(self.count(), 0)

    def test_unrelated_friendship_keeps_cached_result(self) -> None:
        outsider = User.objects.create_user(email="o@example.com", password="pass1234", handle="o")
        self.count()

        accept_friendship(request_friendship(outsider, self.second))

        self.assertEqual(MutualCacheEntry.objects.count(), 1)
