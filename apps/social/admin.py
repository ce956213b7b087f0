from __future__ import annotations

from django.contrib import admin

from .models import Friendship


@admin.register(Friendship)
class FriendshipAdmin(admin.ModelAdmin):
    list_display = ("id", "initiator", "friend", "is_confirmed", "confirmed_at", "created_at")
    list_filter = ("is_confirmed",)
    search_fields = ("initiator__handle", "friend__handle")
    raw_id_fields = ("initiator", "friend")
