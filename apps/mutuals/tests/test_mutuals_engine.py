from __future__ import annotations

import random
from collections import Counter

import pytest

from apps.mutuals.accessor import FriendListAccessor
from apps.mutuals.engine import MutualsEngine, intersect
from apps.mutuals.policies import AllowAllPolicy, SettingsPrivacyPolicy, default_orderings
from apps.mutuals.types import ORDER_RANDOM, ORDER_STABLE, MutualResult, QueryOptions

VIEWER = 10
TARGET = 20


def build_engine(graph, policy=None, rng=None):
    accessor = FriendListAccessor(graph)
    return MutualsEngine(accessor, graph, policy or AllowAllPolicy(), orderings=default_orderings(rng))


@pytest.fixture
def scenario_graph(graph):
    for friend_id in (1, 2, 3, 4):
        graph.befriend(VIEWER, friend_id)
    for friend_id in (3, 4, 5, 6):
        graph.befriend(TARGET, friend_id)
    return graph


def test_intersect_is_commutative():
    assert intersect({1, 2, 3}, {2, 3, 4}) == {2, 3}
    assert intersect({2, 3, 4}, {1, 2, 3}) == {2, 3}
    assert intersect(set(), {1}) == set()


def test_scenario_returns_shared_friends(scenario_graph):
    engine = build_engine(scenario_graph)
    result = engine.compute(VIEWER, TARGET, QueryOptions(limit=5, order=ORDER_STABLE))

    assert result.total_count == 2
    assert [friend.id for friend in result.friends] == [3, 4]
    assert result.friends[0].as_dict() == {
        "id": 3,
        "name": "User 3",
        "avatar": "/avatars/3.png",
        "link": "/members/user3/",
    }


def test_stable_limit_one_returns_lowest_id(scenario_graph):
    engine = build_engine(scenario_graph)
    result = engine.compute(VIEWER, TARGET, QueryOptions(limit=1, order=ORDER_STABLE))

    assert result.total_count == 2
    assert [friend.id for friend in result.friends] == [3]
    assert result.truncated


def test_count_is_commutative(scenario_graph):
    engine = build_engine(scenario_graph)
    forward = engine.compute(VIEWER, TARGET, QueryOptions(limit=5))
    backward = engine.compute(TARGET, VIEWER, QueryOptions(limit=5))
    assert forward.total_count == backward.total_count == engine.count(TARGET, VIEWER)


@pytest.mark.parametrize("limit", [-3, 0, 1, 2, 5])
def test_friends_never_exceed_count(scenario_graph, limit):
    engine = build_engine(scenario_graph)
    result = engine.compute(VIEWER, TARGET, QueryOptions(limit=limit))

    assert 1 <= len(result.friends) <= result.total_count
    assert {friend.id for friend in result.friends} <= {3, 4}


def test_stable_order_is_idempotent(graph):
    for friend_id in range(100, 130):
        graph.befriend(VIEWER, friend_id)
        graph.befriend(TARGET, friend_id)
    engine = build_engine(graph)
    options = QueryOptions(limit=5, order=ORDER_STABLE)

    first = engine.compute(VIEWER, TARGET, options)
    second = engine.compute(VIEWER, TARGET, options)

    assert first == second
    assert [friend.id for friend in first.friends] == [100, 101, 102, 103, 104]


def test_random_order_picks_uniformly(graph):
    shared = [1, 2, 3, 4, 5]
    for friend_id in shared:
        graph.befriend(VIEWER, friend_id)
        graph.befriend(TARGET, friend_id)
    engine = build_engine(graph, rng=random.Random(1234))

    trials = 5000
    picks = Counter(
        engine.compute(VIEWER, TARGET, QueryOptions(limit=1, order=ORDER_RANDOM)).friends[0].id
        for _ in range(trials)
    )

    assert set(picks) == set(shared)
    expected = trials / len(shared)
    for friend_id in shared:
        assert abs(picks[friend_id] - expected) < expected * 0.15


def test_zero_user_id_returns_empty(scenario_graph):
    engine = build_engine(scenario_graph)
    assert engine.compute(0, TARGET) == MutualResult.empty()
    assert engine.compute(VIEWER, 0) == MutualResult.empty()
    assert scenario_graph.calls.get("get_friend_ids", 0) == 0


def test_unknown_order_raises(scenario_graph):
    engine = build_engine(scenario_graph)
    with pytest.raises(ValueError):
        engine.compute(VIEWER, TARGET, QueryOptions(order="alphabetical"))


def test_privacy_denial_looks_like_no_mutuals(scenario_graph):
    scenario_graph.private.add(TARGET)
    policy = SettingsPrivacyPolicy(scenario_graph, {"respect_privacy": True, "hide_private_friends": False})
    engine = build_engine(scenario_graph, policy=policy)

    result = engine.compute(VIEWER, TARGET, QueryOptions(limit=3))

    assert result == MutualResult.empty()
    assert result.total_count == 0 and result.friends == ()
    assert scenario_graph.calls.get("get_friend_ids", 0) == 0


def test_privacy_ignored_when_disabled(scenario_graph):
    scenario_graph.private.add(TARGET)
    policy = SettingsPrivacyPolicy(scenario_graph, {"respect_privacy": False, "hide_private_friends": False})
    engine = build_engine(scenario_graph, policy=policy)

    assert engine.count(VIEWER, TARGET) == 2


def test_hidden_members_are_removed_before_counting(scenario_graph):
    scenario_graph.private.add(3)
    scenario_graph.roles[4] = "banned"
    policy = SettingsPrivacyPolicy(
        scenario_graph,
        {"respect_privacy": True, "hide_private_friends": True, "exclude_roles": ["banned"]},
    )
    engine = build_engine(scenario_graph, policy=policy)

    assert engine.compute(VIEWER, TARGET).total_count == 0

    scenario_graph.roles.pop(4)
    assert engine.count(VIEWER, TARGET) == engine.count(TARGET, VIEWER) == 1


def test_missing_profiles_are_skipped(scenario_graph):
    scenario_graph.missing_profiles.add(3)
    engine = build_engine(scenario_graph)

    result = engine.compute(VIEWER, TARGET, QueryOptions(limit=5, order=ORDER_STABLE))

    assert result.total_count == 2
    assert [friend.id for friend in result.friends] == [4]


def test_profile_lookup_only_for_returned_slice(graph):
    for friend_id in range(1, 41):
        graph.befriend(VIEWER, friend_id)
        graph.befriend(TARGET, friend_id)
    engine = build_engine(graph)

    engine.compute(VIEWER, TARGET, QueryOptions(limit=3, order=ORDER_STABLE))

    assert graph.calls["get_user_display"] == 3


def test_offset_past_end_returns_empty_page(scenario_graph):
    engine = build_engine(scenario_graph)
    result = engine.compute(VIEWER, TARGET, QueryOptions(limit=20, order=ORDER_STABLE, offset=20))

    assert result.total_count == 2
    assert result.friends == ()
