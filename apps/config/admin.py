from django.contrib import admin

from .models import SiteOption


@admin.register(SiteOption)
class SiteOptionAdmin(admin.ModelAdmin):
    list_display = ("key", "value", "updated_at")
    search_fields = ("key",)
    ordering = ("key",)
