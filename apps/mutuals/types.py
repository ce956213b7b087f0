from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Tuple

ORDER_RANDOM = "random"
ORDER_STABLE = "stable"
ORDER_MODES = (ORDER_RANDOM, ORDER_STABLE)


@dataclass(frozen=True)
class FriendSummary:
    id: int
    display_name: str
    avatar_url: str
    profile_url: str

    def as_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.display_name,
            "avatar": self.avatar_url,
            "link": self.profile_url,
        }

    @classmethod
    def from_display(cls, user_id: int, display: Mapping[str, Any]) -> "FriendSummary":
        return cls(
            id=int(user_id),
            display_name=str(display.get("name") or ""),
            avatar_url=str(display.get("avatar_url") or ""),
            profile_url=str(display.get("profile_url") or ""),
        )


@dataclass(frozen=True)
class MutualResult:
    total_count: int = 0
    friends: Tuple[FriendSummary, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls) -> "MutualResult":
        return cls()

    @property
    def truncated(self) -> bool:
        return self.total_count > len(self.friends)


@dataclass(frozen=True)
class QueryOptions:
    limit: int = 3
    order: str = ORDER_RANDOM
    use_cache: bool = True
    offset: int = 0
