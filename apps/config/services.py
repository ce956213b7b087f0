from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from django.core.cache import cache
from django.db import DatabaseError

from .models import SiteOption

logger = logging.getLogger(__name__)

CACHE_KEY = "mutuals_options"
CACHE_TIMEOUT = 60  # seconds

TOOLTIP_POSITIONS = ("auto", "top", "bottom", "left", "right")
ANIMATION_EFFECTS = ("fade", "slide", "none")

DEFAULT_OPTIONS: Dict[str, Any] = {
    "enabled": True,
    "enable_on_directory": True,
    "enable_on_profile": True,
    "display_count": 3,
    "tooltip_position": "auto",
    "animation_effect": "fade",
    "enable_caching": True,
    "cache_duration": 3600,
    "respect_privacy": True,
    "hide_private_friends": True,
    "min_mutual_threshold": 0,
    "exclude_roles": [],
    "debug_mode": False,
}


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "on"}
    return bool(value)


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _clamped(low: int, high: int | None = None) -> Callable[[Any, Any], int]:
    def sanitize(value: Any, default: Any) -> int:
        number = max(low, _as_int(value, default))
        return min(number, high) if high is not None else number

    return sanitize


def _choice(choices: tuple[str, ...]) -> Callable[[Any, Any], str]:
    def sanitize(value: Any, default: Any) -> str:
        text = str(value or "").strip().lower()
        return text if text in choices else default

    return sanitize


def _string_list(value: Any, default: Any) -> list[str]:
    if isinstance(value, str):
        value = value.split(",")
    if not isinstance(value, (list, tuple)):
        return list(default)
    return [str(item).strip() for item in value if str(item).strip()]


SANITIZERS: Dict[str, Callable[[Any, Any], Any]] = {
    "enabled": lambda value, default: _as_bool(value),
    "enable_on_directory": lambda value, default: _as_bool(value),
    "enable_on_profile": lambda value, default: _as_bool(value),
    "display_count": _clamped(1, 5),
    "tooltip_position": _choice(TOOLTIP_POSITIONS),
    "animation_effect": _choice(ANIMATION_EFFECTS),
    "enable_caching": lambda value, default: _as_bool(value),
    "cache_duration": _clamped(300, 86400),
    "respect_privacy": lambda value, default: _as_bool(value),
    "hide_private_friends": lambda value, default: _as_bool(value),
    "min_mutual_threshold": _clamped(0),
    "exclude_roles": _string_list,
    "debug_mode": lambda value, default: _as_bool(value),
}


def sanitize_option(key: str, value: Any) -> Any:
    if key not in DEFAULT_OPTIONS:
        raise ValueError(f"Unknown option: {key}")
    return SANITIZERS[key](value, DEFAULT_OPTIONS[key])


def get_options() -> Dict[str, Any]:
    options = cache.get(CACHE_KEY)
    if isinstance(options, dict):
        return dict(options)

    options = {key: list(value) if isinstance(value, list) else value for key, value in DEFAULT_OPTIONS.items()}
    try:
        stored = list(SiteOption.objects.filter(key__in=DEFAULT_OPTIONS.keys()).values_list("key", "value"))
    except DatabaseError as exc:
        logger.warning("Falling back to default options: %s", exc)
        return options
    for key, value in stored:
        options[key] = sanitize_option(key, value)
    cache.set(CACHE_KEY, options, CACHE_TIMEOUT)
    return dict(options)


def get_option(key: str, default: Any = None) -> Any:
    return get_options().get(key, default)


def update_options(values: Mapping[str, Any]) -> Dict[str, Any]:
    unknown = sorted(set(values) - set(DEFAULT_OPTIONS))
    if unknown:
        raise ValueError(f"Unknown option(s): {', '.join(unknown)}")
    for key, value in values.items():
        SiteOption.objects.update_or_create(key=key, defaults={"value": sanitize_option(key, value)})
    invalidate_cache()
    return get_options()


def update_option(key: str, value: Any) -> Dict[str, Any]:
    return update_options({key: value})


def delete_option(key: str) -> bool:
    deleted, _ = SiteOption.objects.filter(key=key).delete()
    invalidate_cache()
    return bool(deleted)


def invalidate_cache() -> None:
    cache.delete(CACHE_KEY)
