from __future__ import annotations

import logging
import random
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Set

from .providers import SocialGraphProvider
from .types import ORDER_RANDOM, ORDER_STABLE

logger = logging.getLogger(__name__)


class PrivacyPolicy(Protocol):
    def can_view(self, viewer_id: int, target_id: int) -> bool: ...

    def visible_members(self, user_ids: Set[int]) -> Set[int]: ...


class OrderingStrategy(Protocol):
    def arrange(self, user_ids: Iterable[int]) -> List[int]: ...


class AllowAllPolicy:
    def can_view(self, viewer_id: int, target_id: int) -> bool:
        return True

    def visible_members(self, user_ids: Set[int]) -> Set[int]:
        return set(user_ids)


class SettingsPrivacyPolicy:
    """
    Privacy rules driven by the site options.

    ``can_view`` hides the target's mutuals when its friend list is private
    (unless viewer and target are the same user). ``visible_members`` drops
    members with a private friend list or an excluded role. Provider errors
    fail closed.
    """

    def __init__(self, provider: SocialGraphProvider, options: Mapping[str, Any]) -> None:
        self.provider = provider
        self.respect_privacy = bool(options.get("respect_privacy", True))
        self.hide_private = bool(options.get("hide_private_friends", False))
        self.exclude_roles = tuple(options.get("exclude_roles") or ())

    def can_view(self, viewer_id: int, target_id: int) -> bool:
        if not self.respect_privacy or viewer_id == target_id:
            return True
        try:
            return not self.provider.is_friend_list_private(target_id)
        except Exception as exc:
            logger.warning("privacy lookup failed target_id=%s error=%s", target_id, exc)
            return False

    def visible_members(self, user_ids: Set[int]) -> Set[int]:
        if not user_ids or (not self.hide_private and not self.exclude_roles):
            return set(user_ids)
        try:
            hidden = self.provider.find_hidden_members(
                user_ids,
                exclude_roles=self.exclude_roles,
                hide_private=self.hide_private,
            )
        except Exception as exc:
            logger.warning("member visibility lookup failed count=%s error=%s", len(user_ids), exc)
            return set()
        return set(user_ids) - set(hidden)


class StableOrdering:
    def arrange(self, user_ids: Iterable[int]) -> List[int]:
        return sorted(user_ids)


class RandomOrdering:
    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def arrange(self, user_ids: Iterable[int]) -> List[int]:
        # sort first so the permutation depends only on the rng state
        ordered = sorted(user_ids)
        self.rng.shuffle(ordered)
        return ordered


def default_orderings(rng: Optional[random.Random] = None) -> Dict[str, OrderingStrategy]:
    return {
        ORDER_RANDOM: RandomOrdering(rng),
        ORDER_STABLE: StableOrdering(),
    }
