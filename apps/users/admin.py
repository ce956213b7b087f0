from __future__ import annotations

from django.contrib import admin

from apps.users.models import User, UserSettings


class UserSettingsInline(admin.StackedInline):
    model = UserSettings
    can_delete = False


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("id", "handle", "email", "name", "is_active", "is_staff")
    search_fields = ("handle", "email", "name")
    list_filter = ("is_active", "is_staff")
    readonly_fields = ("created_at", "updated_at", "last_login")
    inlines = [UserSettingsInline]
