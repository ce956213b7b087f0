from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.config.services import get_options, update_options

from .serializers import (
    AllMutualFriendsRequestSerializer,
    MutualCountsRequestSerializer,
    MutualFriendsRequestSerializer,
)
from .services import ServiceResult, build_service


def as_response(result: ServiceResult) -> Response:
    return Response(result.data, status=result.status)


class MutualsAPIView(APIView):
    # auth failures are reported by the service with their own codes
    permission_classes = [AllowAny]
    service_factory = staticmethod(build_service)

    def get_service(self):
        return self.service_factory()


class MutualFriendsView(MutualsAPIView):
    def post(self, request):
        service = self.get_service()
        denied = service.precheck(request.user)
        if denied:
            return as_response(denied)
        serializer = MutualFriendsRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return as_response(ServiceResult.failure("invalid_params"))
        data = serializer.validated_data
        result = service.get_mutual_friends(
            request.user,
            data.get("target_user_id"),
            display_count=data.get("display_count"),
            format=data.get("format") or "tooltip",
        )
        return as_response(result)


class AllMutualFriendsView(MutualsAPIView):
    def post(self, request):
        service = self.get_service()
        denied = service.precheck(request.user)
        if denied:
            return as_response(denied)
        serializer = AllMutualFriendsRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return as_response(ServiceResult.failure("invalid_params"))
        data = serializer.validated_data
        return as_response(service.get_all_mutual_friends(request.user, data.get("target_user_id"), data["page"]))


class MutualCountsView(MutualsAPIView):
    def post(self, request):
        service = self.get_service()
        denied = service.precheck(request.user)
        if denied:
            return as_response(denied)
        serializer = MutualCountsRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return as_response(ServiceResult.failure("invalid_params"))
        return as_response(service.get_mutual_counts(request.user, serializer.validated_data["user_ids"]))


class ClientConfigView(MutualsAPIView):
    def get(self, request):
        return as_response(self.get_service().client_config())


class ClearCacheView(MutualsAPIView):
    def post(self, request):
        return as_response(self.get_service().clear_cache(request.user))


class SettingsView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        return Response(get_options(), status=status.HTTP_200_OK)

    def patch(self, request):
        if not isinstance(request.data, dict):
            return Response({"message": "Expected an object", "code": "invalid_params"}, status=status.HTTP_400_BAD_REQUEST)
        try:
            options = update_options(request.data)
        except ValueError as exc:
            return Response({"message": str(exc), "code": "invalid_params"}, status=status.HTTP_400_BAD_REQUEST)
        return Response(options, status=status.HTTP_200_OK)
