from django.contrib import admin

from .models import MutualCacheEntry


@admin.register(MutualCacheEntry)
class MutualCacheEntryAdmin(admin.ModelAdmin):
    list_display = ("viewer_id", "target_id", "expires_at", "updated_at")
    search_fields = ("viewer_id", "target_id")
    readonly_fields = ("payload", "created_at", "updated_at")
