# condo_core/announcements/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from condo_core.announcements.api.serializers import (
    AnnouncementCreateSerializer,
    AnnouncementSerializer,
    AnnouncementUpdateSerializer,
    LikeToggleSerializer,
)
from condo_core.announcements.models import Announcement
from condo_core.announcements.permissions import AnnouncementPermission
from condo_core.announcements.selectors import get_announcement, list_published
from condo_core.announcements.services import AnnouncementService, EngagementService
from condo_core.common.api.pagination import paginate
from condo_core.iam.scope import get_request_tenant_id


@extend_schema_view(
    list=extend_schema(tags=["Announcements"], operation_id="v1_announcements_list", responses={200: AnnouncementSerializer(many=True)}),
    retrieve=extend_schema(tags=["Announcements"], operation_id="v1_announcements_retrieve", responses={200: AnnouncementSerializer}),
    create=extend_schema(tags=["Announcements"], operation_id="v1_announcements_create", request=AnnouncementCreateSerializer, responses={201: AnnouncementSerializer}),
    partial_update=extend_schema(tags=["Announcements"], operation_id="v1_announcements_update", request=AnnouncementUpdateSerializer, responses={200: AnnouncementSerializer}),
    destroy=extend_schema(tags=["Announcements"], operation_id="v1_announcements_delete", responses={204: None}),
    record_view=extend_schema(tags=["Announcements"], operation_id="v1_announcements_view", request=None, responses={204: None}),
    like=extend_schema(tags=["Announcements"], operation_id="v1_announcements_like", request=None, responses={200: LikeToggleSerializer}),
)
class AnnouncementViewSet(viewsets.ViewSet):
    permission_classes = [AnnouncementPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = AnnouncementSerializer
    queryset = Announcement.objects.none()

    def list(self, request):
        qs = list_published(tenant_id=get_request_tenant_id(request), user_id=request.user.id)
        return paginate(request, qs, AnnouncementSerializer)

    def retrieve(self, request, pk=None):
        announcement = get_announcement(
            tenant_id=get_request_tenant_id(request),
            announcement_id=pk,
            user_id=request.user.id,
        )
        return Response(AnnouncementSerializer(announcement).data)

    def create(self, request):
        ser = AnnouncementCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        announcement = AnnouncementService.create(
            tenant_id=get_request_tenant_id(request),
            user=request.user,
            **ser.validated_data,
        )
        return Response(AnnouncementSerializer(announcement).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = AnnouncementUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        announcement = AnnouncementService.update(
            tenant_id=get_request_tenant_id(request),
            announcement_id=pk,
            user=request.user,
            **ser.validated_data,
        )
        return Response(AnnouncementSerializer(announcement).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        AnnouncementService.delete(tenant_id=get_request_tenant_id(request), announcement_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"], url_path="view")
    def record_view(self, request, pk=None):
        EngagementService.record_view(tenant_id=get_request_tenant_id(request), announcement_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def like(self, request, pk=None):
        liked = EngagementService.toggle_like(tenant_id=get_request_tenant_id(request), announcement_id=pk, user=request.user)
        return Response({"liked": liked})
