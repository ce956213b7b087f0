from __future__ import annotations

import logging
from typing import Callable, Mapping, Optional, Protocol

from django.dispatch import Signal

from apps.social.events import FRIENDSHIP_SIGNALS

from .accessor import FriendListAccessor
from .cache import MutualResultCache

logger = logging.getLogger(__name__)

FriendshipHandler = Callable[[int, str], None]


class FriendshipEventSource(Protocol):
    def subscribe(self, handler: FriendshipHandler) -> None: ...


class SignalFriendshipEventSource:
    """Delivers the ``apps.social`` friendship signals to a handler."""

    def __init__(
        self,
        signals: Optional[Mapping[str, Signal]] = None,
        dispatch_uid: Optional[str] = None,
    ) -> None:
        self.signals = signals or FRIENDSHIP_SIGNALS
        self.dispatch_uid = dispatch_uid

    def subscribe(self, handler: FriendshipHandler) -> None:
        for event, signal in self.signals.items():
            signal.connect(
                self._receiver(handler, event),
                weak=False,
                dispatch_uid=f"{self.dispatch_uid}:{event}" if self.dispatch_uid else None,
            )

    @staticmethod
    def _receiver(handler: FriendshipHandler, event: str):
        def receiver(sender, user_id=None, **kwargs) -> None:
            handler(user_id, event)

        return receiver


class InvalidationListener:
    def __init__(self, accessor: FriendListAccessor, result_cache: MutualResultCache) -> None:
        self.accessor = accessor
        self.result_cache = result_cache

    def handle(self, user_id: Optional[int], event: str = "changed") -> None:
        try:
            user_id = int(user_id or 0)
        except (TypeError, ValueError):
            return
        if user_id <= 0:
            return
        self.accessor.invalidate(user_id)
        self.result_cache.invalidate_for_user(user_id)
        logger.info("mutuals invalidated user_id=%s event=%s", user_id, event)

    def attach(self, source: FriendshipEventSource) -> None:
        source.subscribe(self.handle)
