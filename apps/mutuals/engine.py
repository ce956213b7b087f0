from __future__ import annotations

import logging
from typing import Dict, Iterable, Iterator, Optional, Set

from .accessor import FriendListAccessor
from .policies import OrderingStrategy, PrivacyPolicy, default_orderings
from .providers import SocialGraphProvider
from .types import FriendSummary, MutualResult, QueryOptions

logger = logging.getLogger(__name__)


def intersect(first: Set[int], second: Set[int]) -> Set[int]:
    if not first or not second:
        return set()
    smaller, larger = (first, second) if len(first) <= len(second) else (second, first)
    return {user_id for user_id in smaller if user_id in larger}


class MutualsEngine:
    """
    Computes the mutual friends of a viewer and a target user.

    The privacy policy runs before any friend list is fetched; a denial
    returns the same empty result as a pair with no mutual friends. Profile
    lookups only happen for the slice that is returned.
    """

    def __init__(
        self,
        accessor: FriendListAccessor,
        provider: SocialGraphProvider,
        privacy_policy: PrivacyPolicy,
        orderings: Optional[Dict[str, OrderingStrategy]] = None,
        debug: bool = False,
    ) -> None:
        self.accessor = accessor
        self.provider = provider
        self.privacy_policy = privacy_policy
        self.orderings = orderings or default_orderings()
        self.log_level = logging.INFO if debug else logging.DEBUG

    def compute(self, viewer_id: int, target_id: int, options: Optional[QueryOptions] = None) -> MutualResult:
        options = options or QueryOptions()
        ordering = self._ordering_for(options.order)

        mutual_ids = self.mutual_ids(viewer_id, target_id, use_cache=options.use_cache)
        total_count = len(mutual_ids)
        if not total_count:
            return MutualResult.empty()

        limit = max(1, int(options.limit))
        offset = max(0, int(options.offset))
        selected = ordering.arrange(mutual_ids)[offset : offset + limit]
        friends = tuple(self.resolve_summaries(selected))

        logger.log(
            self.log_level,
            "mutuals computed viewer=%s target=%s total=%s returned=%s order=%s offset=%s",
            viewer_id,
            target_id,
            total_count,
            len(friends),
            options.order,
            offset,
        )
        return MutualResult(total_count=total_count, friends=friends)

    def count(self, viewer_id: int, target_id: int, use_cache: bool = True) -> int:
        return len(self.mutual_ids(viewer_id, target_id, use_cache=use_cache))

    def mutual_ids(self, viewer_id: int, target_id: int, use_cache: bool = True) -> Set[int]:
        if not viewer_id or not target_id:
            return set()
        if not self.privacy_policy.can_view(viewer_id, target_id):
            logger.log(self.log_level, "mutuals hidden by privacy viewer=%s target=%s", viewer_id, target_id)
            return set()

        viewer_friends = self.accessor.get_friend_ids(viewer_id, use_cache=use_cache)
        target_friends = self.accessor.get_friend_ids(target_id, use_cache=use_cache)
        mutual_ids = intersect(viewer_friends, target_friends)
        if not mutual_ids:
            return set()
        return self.privacy_policy.visible_members(mutual_ids)

    def resolve_summaries(self, user_ids: Iterable[int]) -> Iterator[FriendSummary]:
        for user_id in user_ids:
            try:
                display = self.provider.get_user_display(user_id)
            except Exception as exc:
                logger.warning("profile lookup failed user_id=%s error=%s", user_id, exc)
                continue
            if not display:
                continue
            yield FriendSummary.from_display(user_id, display)

    def _ordering_for(self, order: str) -> OrderingStrategy:
        try:
            return self.orderings[order]
        except KeyError:
            raise ValueError(f"Unknown ordering: {order}") from None
