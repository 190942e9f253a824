# condo_core/tenants/api/views.py
from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from condo_core.tenants.api.serializers import (
    TenantCreateSerializer,
    TenantSerializer,
    TenantUpdateSerializer,
)
from condo_core.tenants.models import Tenant
from condo_core.tenants.permissions import TenantPermission
from condo_core.tenants.selectors import get_tenant, get_tenant_by_slug, tenant_qs
from condo_core.tenants.services import TenantService


@extend_schema_view(
    list=extend_schema(tags=["Tenants"], operation_id="v1_tenants_list", responses={200: TenantSerializer(many=True)}),
    retrieve=extend_schema(tags=["Tenants"], operation_id="v1_tenants_retrieve", responses={200: TenantSerializer}),
    by_slug=extend_schema(tags=["Tenants"], operation_id="v1_tenants_by_slug", responses={200: TenantSerializer}),
    create=extend_schema(tags=["Tenants"], operation_id="v1_tenants_create", request=TenantCreateSerializer, responses={201: TenantSerializer}),
    partial_update=extend_schema(tags=["Tenants"], operation_id="v1_tenants_update", request=TenantUpdateSerializer, responses={200: TenantSerializer}),
    destroy=extend_schema(tags=["Tenants"], operation_id="v1_tenants_delete", responses={204: None}),
    activate=extend_schema(tags=["Tenants"], operation_id="v1_tenants_activate", request=None, responses={200: TenantSerializer}),
    deactivate=extend_schema(tags=["Tenants"], operation_id="v1_tenants_deactivate", request=None, responses={200: TenantSerializer}),
)
class TenantViewSet(viewsets.ViewSet):
    """
    Condominium management. Admin-level (no X-Tenant-Id).
    Routing is centralized in condo_core/api/urls.py.
    """

    permission_classes = [TenantPermission]
    tenant_scoped = False
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    # critical for drf-spectacular
    serializer_class = TenantSerializer
    queryset = Tenant.objects.none()

    def _get_object(self, request, pk) -> Tenant:
        obj = get_tenant(tenant_id=pk)
        self.check_object_permissions(request, obj)
        return obj

    def list(self, request):
        qs = tenant_qs().order_by("-created_at")[:300]
        return Response(TenantSerializer(qs, many=True).data, status=status.HTTP_200_OK)

    def retrieve(self, request, pk=None):
        return Response(TenantSerializer(self._get_object(request, pk)).data, status=status.HTTP_200_OK)

    @action(detail=False, methods=["get"], url_path=r"by-slug/(?P<slug>[a-z0-9-]+)")
    def by_slug(self, request, slug=None):
        return Response(TenantSerializer(get_tenant_by_slug(slug=slug)).data, status=status.HTTP_200_OK)

    def create(self, request):
        ser = TenantCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = TenantService.create(name=ser.validated_data["name"], slug=ser.validated_data["slug"])
        return Response(TenantSerializer(t).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        obj = self._get_object(request, pk)
        ser = TenantUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        t = TenantService.update(
            tenant_id=obj.id,
            name=ser.validated_data.get("name"),
            slug=ser.validated_data.get("slug"),
        )
        return Response(TenantSerializer(t).data, status=status.HTTP_200_OK)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        obj = self._get_object(request, pk)
        TenantService.delete(tenant_id=obj.id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def activate(self, request, pk=None):
        obj = self._get_object(request, pk)
        return Response(TenantSerializer(TenantService.activate(tenant_id=obj.id)).data, status=status.HTTP_200_OK)

    @action(detail=True, methods=["post"])
    def deactivate(self, request, pk=None):
        obj = self._get_object(request, pk)
        return Response(TenantSerializer(TenantService.deactivate(tenant_id=obj.id)).data, status=status.HTTP_200_OK)
