from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from django.template.loader import render_to_string

FORMAT_TOOLTIP = "tooltip"
FORMAT_MODAL = "modal"
FORMATS = (FORMAT_TOOLTIP, FORMAT_MODAL)

TEMPLATES = {
    FORMAT_TOOLTIP: "mutuals/tooltip.html",
    FORMAT_MODAL: "mutuals/modal.html",
}
FRIEND_LIST_TEMPLATE = "mutuals/friend_list.html"


class MutualsRenderer:
    """Renders HTML fragments; templates can be overridden from the project ``templates`` dir."""

    def __init__(self, options: Optional[Mapping[str, Any]] = None) -> None:
        options = options or {}
        self.tooltip_position = options.get("tooltip_position", "auto")
        self.animation_effect = options.get("animation_effect", "fade")

    def render(self, fmt: str, *, count: int, friends: List[Dict[str, Any]], user_id: int) -> str:
        template = TEMPLATES.get(fmt, TEMPLATES[FORMAT_TOOLTIP])
        context = {
            "count": count,
            "friends": friends,
            "user_id": user_id,
            "show_view_all": count > len(friends),
            "tooltip_position": self.tooltip_position,
            "animation_effect": self.animation_effect,
        }
        return render_to_string(template, context)

    def render_list(self, friends: List[Dict[str, Any]]) -> str:
        return render_to_string(FRIEND_LIST_TEMPLATE, {"friends": friends})
