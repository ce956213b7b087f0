from __future__ import annotations

import logging

from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Each signal is sent once per affected user with ``user_id`` as kwarg.
friendship_accepted = Signal()
friendship_deleted = Signal()
friendship_withdrawn = Signal()

FRIENDSHIP_SIGNALS = {
    "accepted": friendship_accepted,
    "deleted": friendship_deleted,
    "withdrawn": friendship_withdrawn,
}


def emit_friendship_event(event: str, *user_ids: int) -> None:
    signal = FRIENDSHIP_SIGNALS[event]
    for user_id in user_ids:
        logger.debug("friendship event=%s user_id=%s", event, user_id)
        signal.send(sender=None, user_id=user_id)
