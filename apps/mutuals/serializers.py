from __future__ import annotations

from rest_framework import serializers


class MutualFriendsRequestSerializer(serializers.Serializer):
    target_user_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    display_count = serializers.IntegerField(required=False, allow_null=True)
    format = serializers.CharField(required=False, allow_blank=True, default="tooltip")


class AllMutualFriendsRequestSerializer(serializers.Serializer):
    target_user_id = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    page = serializers.IntegerField(required=False, default=1)


class MutualCountsRequestSerializer(serializers.Serializer):
    user_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=True)

