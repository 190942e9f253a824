# condo_core/reservations/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from condo_core.common.api.pagination import paginate
from condo_core.iam.roles import own_only_user_id
from condo_core.iam.scope import get_request_tenant_id
from condo_core.reservations.api.serializers import (
    CommonAreaCreateSerializer,
    CommonAreaSerializer,
    CommonAreaUpdateSerializer,
    ReservationCreateSerializer,
    ReservationSerializer,
    ReservationStatusSerializer,
)
from condo_core.reservations.models import CommonArea, Reservation
from condo_core.reservations.permissions import CommonAreaPermission, ReservationPermission
from condo_core.reservations.selectors import get_area, get_reservation, list_areas, list_by_area, list_reservations
from condo_core.reservations.services import CommonAreaService, ReservationService

INCLUDE_INACTIVE_PARAM = OpenApiParameter("include_inactive", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False)
MONTH_PARAM = OpenApiParameter("month", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False, description="YYYY-MM")


def _truthy(value) -> bool:
    return str(value or "").lower() in ("1", "true", "yes")


@extend_schema_view(
    list=extend_schema(tags=["Common areas"], operation_id="v1_common_areas_list", parameters=[INCLUDE_INACTIVE_PARAM], responses={200: CommonAreaSerializer(many=True)}),
    retrieve=extend_schema(tags=["Common areas"], operation_id="v1_common_areas_retrieve", responses={200: CommonAreaSerializer}),
    create=extend_schema(tags=["Common areas"], operation_id="v1_common_areas_create", request=CommonAreaCreateSerializer, responses={201: CommonAreaSerializer}),
    partial_update=extend_schema(tags=["Common areas"], operation_id="v1_common_areas_update", request=CommonAreaUpdateSerializer, responses={200: CommonAreaSerializer}),
    destroy=extend_schema(tags=["Common areas"], operation_id="v1_common_areas_delete", responses={204: None}),
)
class CommonAreaViewSet(viewsets.ViewSet):
    permission_classes = [CommonAreaPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = CommonAreaSerializer
    queryset = CommonArea.objects.none()

    def list(self, request):
        qs = list_areas(
            tenant_id=get_request_tenant_id(request),
            include_inactive=_truthy(request.query_params.get("include_inactive")),
        )
        return Response(CommonAreaSerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        area = get_area(tenant_id=get_request_tenant_id(request), area_id=pk)
        return Response(CommonAreaSerializer(area).data)

    def create(self, request):
        ser = CommonAreaCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        area = CommonAreaService.create(tenant_id=get_request_tenant_id(request), **ser.validated_data)
        return Response(CommonAreaSerializer(area).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = CommonAreaUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        area = CommonAreaService.update(tenant_id=get_request_tenant_id(request), area_id=pk, **ser.validated_data)
        return Response(CommonAreaSerializer(area).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        CommonAreaService.delete(tenant_id=get_request_tenant_id(request), area_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(tags=["Reservations"], operation_id="v1_reservations_list", responses={200: ReservationSerializer(many=True)}),
    retrieve=extend_schema(tags=["Reservations"], operation_id="v1_reservations_retrieve", responses={200: ReservationSerializer}),
    by_area=extend_schema(tags=["Reservations"], operation_id="v1_reservations_by_area", parameters=[MONTH_PARAM], responses={200: ReservationSerializer(many=True)}),
    create=extend_schema(tags=["Reservations"], operation_id="v1_reservations_create", request=ReservationCreateSerializer, responses={201: ReservationSerializer}),
    update_status=extend_schema(tags=["Reservations"], operation_id="v1_reservations_update_status", request=ReservationStatusSerializer, responses={200: ReservationSerializer}),
    destroy=extend_schema(tags=["Reservations"], operation_id="v1_reservations_delete", responses={204: None}),
)
class ReservationViewSet(viewsets.ViewSet):
    permission_classes = [ReservationPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = ReservationSerializer
    queryset = Reservation.objects.none()

    def list(self, request):
        qs = list_reservations(
            tenant_id=get_request_tenant_id(request),
            user_id=own_only_user_id(request.user),
        )
        return paginate(request, qs, ReservationSerializer)

    def retrieve(self, request, pk=None):
        reservation = get_reservation(tenant_id=get_request_tenant_id(request), reservation_id=pk)
        own_only = own_only_user_id(request.user)
        if own_only is not None and reservation.reserved_by_id != own_only:
            raise NotFound(f"Reservation {pk} not found.")
        return Response(ReservationSerializer(reservation).data)

    @action(detail=False, methods=["get"], url_path=r"area/(?P<area_id>[0-9a-fA-F-]{36})")
    def by_area(self, request, area_id=None):
        tenant_id = get_request_tenant_id(request)
        get_area(tenant_id=tenant_id, area_id=area_id)
        qs = list_by_area(tenant_id=tenant_id, area_id=area_id, month=request.query_params.get("month") or None)
        return Response(ReservationSerializer(qs, many=True).data)

    def create(self, request):
        ser = ReservationCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reservation = ReservationService.create(
            tenant_id=get_request_tenant_id(request),
            user=request.user,
            **ser.validated_data,
        )
        return Response(ReservationSerializer(reservation).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["patch"], url_path="status")
    def update_status(self, request, pk=None):
        ser = ReservationStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        reservation = ReservationService.update_status(
            tenant_id=get_request_tenant_id(request),
            reservation_id=pk,
            user=request.user,
            status=ser.validated_data["status"],
            rejection_reason=ser.validated_data.get("rejection_reason"),
        )
        return Response(ReservationSerializer(reservation).data)

    def destroy(self, request, pk=None):
        ReservationService.delete(tenant_id=get_request_tenant_id(request), reservation_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
