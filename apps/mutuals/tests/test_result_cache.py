from __future__ import annotations

from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone

from apps.mutuals.cache import MutualResultCache
from apps.mutuals.models import MutualCacheEntry
from apps.mutuals.tasks import cleanup_expired_mutual_cache

PAYLOAD = {"count": 2, "mutuals": [{"id": 3, "name": "c", "avatar": "", "link": ""}], "limit": 3, "order": "random"}


@pytest.mark.django_db
def test_set_writes_both_tiers():
    result_cache = MutualResultCache(ttl=600)
    assert result_cache.set(1, 2, PAYLOAD)

    assert cache.get(result_cache.make_key(1, 2)) == PAYLOAD
    entry = MutualCacheEntry.objects.get(viewer_id=1, target_id=2)
    assert entry.payload == PAYLOAD
    assert not entry.is_expired


@pytest.mark.django_db
def test_get_falls_back_to_durable_tier_and_backfills():
    result_cache = MutualResultCache(ttl=600)
    result_cache.set(1, 2, PAYLOAD)
    cache.clear()

    assert result_cache.get(1, 2) == PAYLOAD
    assert cache.get(result_cache.make_key(1, 2)) == PAYLOAD


@pytest.mark.django_db
def test_key_is_ordered_pair():
    result_cache = MutualResultCache()
    result_cache.set(1, 2, PAYLOAD)

    assert result_cache.get(2, 1) is None


@pytest.mark.django_db
def test_set_replaces_whole_value():
    result_cache = MutualResultCache()
    result_cache.set(1, 2, PAYLOAD)
    result_cache.set(1, 2, {"count": 0, "mutuals": [], "limit": 3, "order": "random"})

    assert result_cache.get(1, 2)["count"] == 0
    assert MutualCacheEntry.objects.filter(viewer_id=1, target_id=2).count() == 1


@pytest.mark.django_db
def test_invalidate_for_user_only_touches_affected_pairs():
    result_cache = MutualResultCache()
    result_cache.set(1, 2, PAYLOAD)
    result_cache.set(2, 5, PAYLOAD)
    result_cache.set(3, 4, PAYLOAD)

    deleted = result_cache.invalidate_for_user(2)

    assert deleted == 2
    assert result_cache.get(1, 2) is None
    assert result_cache.get(2, 5) is None
    assert result_cache.get(3, 4) == PAYLOAD
    assert set(MutualCacheEntry.objects.values_list("viewer_id", "target_id")) == {(3, 4)}


@pytest.mark.django_db
def test_clear_all_empties_both_tiers():
    result_cache = MutualResultCache()
    result_cache.set(1, 2, PAYLOAD)
    result_cache.set(3, 4, PAYLOAD)

    assert result_cache.clear_all() == 2
    assert result_cache.get(1, 2) is None
    assert result_cache.get(3, 4) is None


@pytest.mark.django_db
def test_expired_rows_are_ignored_and_cleaned_up():
    MutualCacheEntry.objects.create(
        viewer_id=1, target_id=2, payload=PAYLOAD, expires_at=timezone.now() - timedelta(minutes=1)
    )
    MutualCacheEntry.objects.create(
        viewer_id=3, target_id=4, payload=PAYLOAD, expires_at=timezone.now() + timedelta(minutes=10)
    )

    assert MutualResultCache().get(1, 2) is None
    assert cleanup_expired_mutual_cache() == 1
    assert list(MutualCacheEntry.objects.values_list("viewer_id", flat=True)) == [3]


def test_zero_ids_are_never_cached():
    result_cache = MutualResultCache()
    assert result_cache.set(0, 2, PAYLOAD) is False
    assert result_cache.get(0, 2) is None


@pytest.mark.django_db
def test_evicted_user_generation_does_not_revive_invalidated_entry():
    result_cache = MutualResultCache()
    result_cache.set(1, 2, PAYLOAD)
    result_cache.invalidate_for_user(1)

    cache.delete(result_cache._generation_key(1))

    assert result_cache.get(1, 2) is None


@pytest.mark.django_db
def test_evicted_global_generation_does_not_revive_cleared_entries():
    result_cache = MutualResultCache()
    result_cache.set(1, 2, PAYLOAD)
    result_cache.clear_all()

    cache.delete(result_cache._generation_key(result_cache.ALL))

    assert result_cache.get(1, 2) is None


@pytest.mark.django_db
def test_generation_tokens_are_created_on_first_use():
    result_cache = MutualResultCache()
    key = result_cache.make_key(1, 2)

    assert cache.get(result_cache._generation_key(1)) is not None
    assert result_cache.make_key(1, 2) == key
    assert not key.endswith(":0.0.0")
