from __future__ import annotations

from django.urls import path

from .views import (
    AllMutualFriendsView,
    ClearCacheView,
    ClientConfigView,
    MutualCountsView,
    MutualFriendsView,
    SettingsView,
)

urlpatterns = [
    path("mutuals/", MutualFriendsView.as_view(), name="mutuals"),
    path("mutuals/all/", AllMutualFriendsView.as_view(), name="mutuals-all"),
    path("mutuals/counts/", MutualCountsView.as_view(), name="mutuals-counts"),
    path("mutuals/config/", ClientConfigView.as_view(), name="mutuals-config"),
    path("mutuals/cache/clear/", ClearCacheView.as_view(), name="mutuals-cache-clear"),
    path("mutuals/settings/", SettingsView.as_view(), name="mutuals-settings"),
]
