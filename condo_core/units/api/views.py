# condo_core/units/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from condo_core.common.api.pagination import paginate
from condo_core.iam.scope import get_request_tenant_id
from condo_core.units.api.serializers import (
    UnitCountSerializer,
    UnitCreateSerializer,
    UnitSerializer,
    UnitUpdateSerializer,
)
from condo_core.units.models import Unit
from condo_core.units.permissions import UnitPermission
from condo_core.units.selectors import UnitSelector
from condo_core.units.services import UnitService

UNIT_LIST_PARAMS = [
    OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("block", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("search", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
]


@extend_schema_view(
    list=extend_schema(tags=["Units"], operation_id="v1_units_list", parameters=UNIT_LIST_PARAMS, responses={200: UnitSerializer(many=True)}),
    retrieve=extend_schema(tags=["Units"], operation_id="v1_units_retrieve", responses={200: UnitSerializer}),
    create=extend_schema(tags=["Units"], operation_id="v1_units_create", request=UnitCreateSerializer, responses={201: UnitSerializer}),
    partial_update=extend_schema(tags=["Units"], operation_id="v1_units_update", request=UnitUpdateSerializer, responses={200: UnitSerializer}),
    destroy=extend_schema(tags=["Units"], operation_id="v1_units_delete", responses={204: None}),
    activate=extend_schema(tags=["Units"], operation_id="v1_units_activate", request=None, responses={200: UnitSerializer}),
    deactivate=extend_schema(tags=["Units"], operation_id="v1_units_deactivate", request=None, responses={200: UnitSerializer}),
    count=extend_schema(tags=["Units"], operation_id="v1_units_count", responses={200: UnitCountSerializer}),
)
class UnitViewSet(viewsets.ViewSet):
    """
    Thin API layer:
    - scope from request
    - selectors for reads
    - services for writes
    """

    permission_classes = [UnitPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = UnitSerializer
    queryset = Unit.objects.none()

    def _get_object(self, request, pk) -> Unit:
        try:
            return UnitSelector.get_unit(tenant_id=get_request_tenant_id(request), unit_id=pk)
        except UnitSelector.NotFound:
            raise NotFound("Unit not found in this tenant.")

    def list(self, request):
        qs = UnitSelector.list_units(tenant_id=get_request_tenant_id(request), params=request.query_params)
        return paginate(request, qs, UnitSerializer)

    def retrieve(self, request, pk=None):
        return Response(UnitSerializer(self._get_object(request, pk)).data)

    def create(self, request):
        ser = UnitCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        unit = UnitService.create(
            tenant_id=get_request_tenant_id(request),
            block=ser.validated_data["block"],
            number=ser.validated_data["number"],
            identifier=ser.validated_data.get("identifier") or None,
        )
        return Response(UnitSerializer(unit).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = UnitUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        unit = UnitService.update(tenant_id=get_request_tenant_id(request), unit_id=pk, **ser.validated_data)
        return Response(UnitSerializer(unit).data)

    def destroy(self, request, pk=None):
        UnitService.delete(tenant_id=get_request_tenant_id(request), unit_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        unit = UnitService.activate(tenant_id=get_request_tenant_id(request), unit_id=pk)
        return Response(UnitSerializer(unit).data)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        unit = UnitService.deactivate(tenant_id=get_request_tenant_id(request), unit_id=pk)
        return Response(UnitSerializer(unit).data)

    @action(detail=False, methods=["get"])
    def count(self, request):
        n = UnitSelector.count_by_tenant(tenant_id=get_request_tenant_id(request))
        return Response({"count": n})
