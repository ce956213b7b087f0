from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from django.conf import settings

from apps.config.services import get_options
from apps.core_platform.rate_limit import RateLimiter

from .accessor import FriendListAccessor
from .cache import MutualResultCache
from .engine import MutualsEngine
from .policies import SettingsPrivacyPolicy, default_orderings
from .providers import DjangoSocialGraphProvider, SocialGraphProvider
from .rendering import FORMAT_TOOLTIP, FORMATS, MutualsRenderer
from .types import ORDER_RANDOM, ORDER_STABLE, MutualResult, QueryOptions

logger = logging.getLogger(__name__)

MIN_DISPLAY_COUNT = 1
MAX_DISPLAY_COUNT = 5

FAILURES: Dict[str, tuple[int, str]] = {
    "invalid_auth": (401, "You must be logged in"),
    "forbidden": (403, "You do not have permission to perform this action"),
    "invalid_target": (400, "Invalid user ID"),
    "not_found": (404, "User not found"),
    "invalid_params": (400, "Invalid parameters"),
    "rate_limited": (429, "Too many requests. Please try again later."),
    "disabled": (503, "Mutual friends are disabled"),
}


@dataclass(frozen=True)
class ServiceResult:
    ok: bool
    data: Dict[str, Any] = field(default_factory=dict)
    status: int = 200

    @classmethod
    def success(cls, data: Dict[str, Any], status: int = 200) -> "ServiceResult":
        return cls(ok=True, data=data, status=status)

    @classmethod
    def failure(cls, code: str, message: Optional[str] = None) -> "ServiceResult":
        status, default_message = FAILURES[code]
        # unknown targets keep the invalid_target code on the wire
        wire_code = "invalid_target" if code == "not_found" else code
        return cls(ok=False, data={"message": message or default_message, "code": wire_code}, status=status)


def _positive_int(value: Any) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number > 0 else 0


class MutualFriendsService:
    """
    Request-level operations behind the mutual friends endpoints.

    Every operation validates in the same order (feature switch, caller,
    target, parameters, target existence, rate limit) and reports problems as
    a failed ``ServiceResult`` rather than raising.
    """

    def __init__(
        self,
        *,
        accessor: FriendListAccessor,
        engine: MutualsEngine,
        result_cache: MutualResultCache,
        provider: SocialGraphProvider,
        options: Mapping[str, Any],
        rate_limiter: RateLimiter,
        renderer: Optional[MutualsRenderer] = None,
        page_size: Optional[int] = None,
        max_count_targets: Optional[int] = None,
    ) -> None:
        self.accessor = accessor
        self.engine = engine
        self.result_cache = result_cache
        self.provider = provider
        self.options = dict(options)
        self.rate_limiter = rate_limiter
        self.renderer = renderer or MutualsRenderer(self.options)
        self.page_size = page_size or getattr(settings, "MUTUALS_PAGE_SIZE", 20)
        self.max_count_targets = max_count_targets or getattr(settings, "MUTUALS_MAX_COUNT_TARGETS", 50)

    @property
    def caching_enabled(self) -> bool:
        return bool(self.options.get("enable_caching", True))

    def precheck(self, caller: Any) -> Optional[ServiceResult]:
        if not self.options.get("enabled", True):
            return ServiceResult.failure("disabled")
        if caller is None or not getattr(caller, "is_authenticated", False):
            return ServiceResult.failure("invalid_auth")
        return None

    def get_mutual_friends(
        self,
        caller: Any,
        target_user_id: Any,
        display_count: Any = None,
        format: str = FORMAT_TOOLTIP,
    ) -> ServiceResult:
        target_id = _positive_int(target_user_id)
        rejected = self._validate(caller, target_id)
        if rejected:
            return rejected

        limit = self._display_count(display_count)
        fmt = format if format in FORMATS else FORMAT_TOOLTIP
        viewer_id = caller.pk

        payload = self._cached_payload(viewer_id, target_id, limit)
        if payload is None:
            result = self.engine.compute(
                viewer_id,
                target_id,
                QueryOptions(limit=limit, order=ORDER_RANDOM, use_cache=self.caching_enabled),
            )
            result = self._apply_threshold(result)
            payload = {
                "count": result.total_count,
                "mutuals": [friend.as_dict() for friend in result.friends],
                "limit": limit,
                "order": ORDER_RANDOM,
            }
            if self.caching_enabled:
                self.result_cache.set(viewer_id, target_id, payload, ttl=self.options.get("cache_duration"))

        html = self.renderer.render(fmt, count=payload["count"], friends=payload["mutuals"], user_id=target_id)
        return ServiceResult.success({"count": payload["count"], "mutuals": payload["mutuals"], "html": html})

    def get_all_mutual_friends(self, caller: Any, target_user_id: Any, page: Any = 1) -> ServiceResult:
        target_id = _positive_int(target_user_id)
        page_number = _positive_int(page)
        rejected = self._validate(caller, target_id, page_valid=page_number >= 1)
        if rejected:
            return rejected

        result = self.engine.compute(
            caller.pk,
            target_id,
            QueryOptions(
                limit=self.page_size,
                order=ORDER_STABLE,
                use_cache=self.caching_enabled,
                offset=(page_number - 1) * self.page_size,
            ),
        )
        result = self._apply_threshold(result)
        friends = [friend.as_dict() for friend in result.friends]
        return ServiceResult.success(
            {
                "count": result.total_count,
                "page": page_number,
                "total_pages": math.ceil(result.total_count / self.page_size),
                "friends": friends,
                "html": self.renderer.render_list(friends),
            }
        )

    def get_mutual_counts(self, caller: Any, user_ids: Iterable[Any]) -> ServiceResult:
        denied = self.precheck(caller)
        if denied:
            return denied
        if not self.options.get("enable_on_directory", True):
            return ServiceResult.failure("disabled")

        targets: List[int] = []
        for value in user_ids or ():
            target_id = _positive_int(value)
            if not target_id:
                return ServiceResult.failure("invalid_params")
            if target_id != caller.pk and target_id not in targets:
                targets.append(target_id)
        targets = targets[: self.max_count_targets]

        if self.rate_limiter.hit(caller.pk):
            return ServiceResult.failure("rate_limited")

        threshold = int(self.options.get("min_mutual_threshold") or 0)
        counts: Dict[str, int] = {}
        for target_id in targets:
            count = self.engine.count(caller.pk, target_id, use_cache=self.caching_enabled)
            counts[str(target_id)] = count if count >= threshold else 0
        return ServiceResult.success({"counts": counts})

    def clear_cache(self, caller: Any) -> ServiceResult:
        if caller is None or not getattr(caller, "is_authenticated", False):
            return ServiceResult.failure("invalid_auth")
        if not getattr(caller, "is_staff", False):
            return ServiceResult.failure("forbidden")
        deleted = self.result_cache.clear_all()
        logger.info("mutuals cache cleared by user_id=%s rows=%s", caller.pk, deleted)
        return ServiceResult.success({"message": "Cache cleared successfully"})

    def client_config(self) -> ServiceResult:
        return ServiceResult.success(
            {
                "enabled": bool(self.options.get("enabled", True)),
                "displayCount": self._display_count(None),
                "tooltipPosition": self.options.get("tooltip_position", "auto"),
                "animationEffect": self.options.get("animation_effect", "fade"),
                "enableOnDirectory": bool(self.options.get("enable_on_directory", True)),
                "enableOnProfile": bool(self.options.get("enable_on_profile", True)),
            }
        )

    def _validate(self, caller: Any, target_id: int, page_valid: bool = True) -> Optional[ServiceResult]:
        denied = self.precheck(caller)
        if denied:
            return denied
        if not target_id:
            return ServiceResult.failure("invalid_target")
        if not page_valid:
            return ServiceResult.failure("invalid_params")
        try:
            exists = self.provider.user_exists(target_id)
        except Exception as exc:
            logger.warning("target lookup failed target_id=%s error=%s", target_id, exc, exc_info=True)
            exists = False
        if not exists:
            return ServiceResult.failure("not_found")
        if self.rate_limiter.hit(caller.pk):
            logger.info("mutuals rate limited user_id=%s", caller.pk)
            return ServiceResult.failure("rate_limited")
        return None

    def _display_count(self, value: Any) -> int:
        if value is None or value == "":
            value = self.options.get("display_count", 3)
        try:
            number = int(value)
        except (TypeError, ValueError):
            number = MIN_DISPLAY_COUNT
        return max(MIN_DISPLAY_COUNT, min(MAX_DISPLAY_COUNT, number))

    def _cached_payload(self, viewer_id: int, target_id: int, limit: int) -> Optional[Dict[str, Any]]:
        if not self.caching_enabled:
            return None
        payload = self.result_cache.get(viewer_id, target_id)
        if not payload or payload.get("limit") != limit or payload.get("order") != ORDER_RANDOM:
            return None
        return payload

    def _apply_threshold(self, result: MutualResult) -> MutualResult:
        threshold = int(self.options.get("min_mutual_threshold") or 0)
        if result.total_count and result.total_count < threshold:
            return MutualResult.empty()
        return result


def build_service(
    *,
    provider: Optional[SocialGraphProvider] = None,
    options: Optional[Mapping[str, Any]] = None,
    rng: Optional[random.Random] = None,
) -> MutualFriendsService:
    provider = provider or DjangoSocialGraphProvider()
    options = dict(options) if options is not None else get_options()
    cache_alias = getattr(settings, "MUTUALS_CACHE_ALIAS", "default")

    accessor = FriendListAccessor(provider, cache_alias=cache_alias)
    engine = MutualsEngine(
        accessor,
        provider,
        SettingsPrivacyPolicy(provider, options),
        orderings=default_orderings(rng),
        debug=bool(options.get("debug_mode")),
    )
    return MutualFriendsService(
        accessor=accessor,
        engine=engine,
        result_cache=MutualResultCache(cache_alias=cache_alias, ttl=int(options.get("cache_duration") or 3600)),
        provider=provider,
        options=options,
        rate_limiter=RateLimiter(
            "mutuals",
            getattr(settings, "MUTUALS_RATE_LIMIT", 30),
            getattr(settings, "MUTUALS_RATE_WINDOW_SECONDS", 60),
            cache_alias=cache_alias,
        ),
    )
