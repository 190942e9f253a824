# condo_core/issues/api/views.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.exceptions import PermissionDenied
from rest_framework.response import Response

from condo_core.common.api.pagination import paginate
from condo_core.iam.roles import own_only_user_id
from condo_core.iam.scope import get_request_tenant_id
from condo_core.issues.api.serializers import (
    IssueCategoryCreateSerializer,
    IssueCategorySerializer,
    IssueCategoryUpdateSerializer,
    IssueCreateSerializer,
    IssueSerializer,
    IssueUpdateSerializer,
)
from condo_core.issues.models import Issue, IssueCategory
from condo_core.issues.permissions import IssueCategoryPermission, IssuePermission
from condo_core.issues.selectors import get_category, get_issue, list_categories, list_issues
from condo_core.issues.services import IssueCategoryService, IssueService

ISSUE_LIST_PARAMS = [
    OpenApiParameter("status", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
    OpenApiParameter("priority", OpenApiTypes.STR, OpenApiParameter.QUERY, required=False),
]


@extend_schema_view(
    list=extend_schema(tags=["Issues"], operation_id="v1_issues_list", parameters=ISSUE_LIST_PARAMS, responses={200: IssueSerializer(many=True)}),
    retrieve=extend_schema(tags=["Issues"], operation_id="v1_issues_retrieve", responses={200: IssueSerializer}),
    create=extend_schema(tags=["Issues"], operation_id="v1_issues_create", request=IssueCreateSerializer, responses={201: IssueSerializer}),
    partial_update=extend_schema(tags=["Issues"], operation_id="v1_issues_update", request=IssueUpdateSerializer, responses={200: IssueSerializer}),
    destroy=extend_schema(tags=["Issues"], operation_id="v1_issues_delete", responses={204: None}),
)
class IssueViewSet(viewsets.ViewSet):
    permission_classes = [IssuePermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = IssueSerializer
    queryset = Issue.objects.none()

    def list(self, request):
        qs = list_issues(
            tenant_id=get_request_tenant_id(request),
            created_by_id=own_only_user_id(request.user),
            status=request.query_params.get("status") or None,
            priority=request.query_params.get("priority") or None,
        )
        return paginate(request, qs, IssueSerializer)

    def retrieve(self, request, pk=None):
        issue = get_issue(tenant_id=get_request_tenant_id(request), issue_id=pk)
        own_only = own_only_user_id(request.user)
        if own_only is not None and issue.created_by_id != own_only:
            raise PermissionDenied("You do not have permission to view this issue.")
        return Response(IssueSerializer(issue).data)

    def create(self, request):
        ser = IssueCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        issue = IssueService.create(tenant_id=get_request_tenant_id(request), user=request.user, **ser.validated_data)
        return Response(IssueSerializer(issue).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = IssueUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        issue = IssueService.update(
            tenant_id=get_request_tenant_id(request),
            issue_id=pk,
            user=request.user,
            restrict_to_user_id=own_only_user_id(request.user),
            **ser.validated_data,
        )
        return Response(IssueSerializer(issue).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        IssueService.delete(tenant_id=get_request_tenant_id(request), issue_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema_view(
    list=extend_schema(
        tags=["Issue categories"],
        operation_id="v1_issue_categories_list",
        parameters=[OpenApiParameter("include_inactive", OpenApiTypes.BOOL, OpenApiParameter.QUERY, required=False)],
        responses={200: IssueCategorySerializer(many=True)},
    ),
    retrieve=extend_schema(tags=["Issue categories"], operation_id="v1_issue_categories_retrieve", responses={200: IssueCategorySerializer}),
    create=extend_schema(tags=["Issue categories"], operation_id="v1_issue_categories_create", request=IssueCategoryCreateSerializer, responses={201: IssueCategorySerializer}),
    partial_update=extend_schema(tags=["Issue categories"], operation_id="v1_issue_categories_update", request=IssueCategoryUpdateSerializer, responses={200: IssueCategorySerializer}),
    destroy=extend_schema(tags=["Issue categories"], operation_id="v1_issue_categories_delete", responses={204: None}),
)
class IssueCategoryViewSet(viewsets.ViewSet):
    permission_classes = [IssueCategoryPermission]
    lookup_value_regex = r"[0-9a-fA-F-]{36}"

    serializer_class = IssueCategorySerializer
    queryset = IssueCategory.objects.none()

    def list(self, request):
        include_inactive = str(request.query_params.get("include_inactive") or "").lower() in ("1", "true", "yes")
        qs = list_categories(tenant_id=get_request_tenant_id(request), include_inactive=include_inactive)
        return Response(IssueCategorySerializer(qs, many=True).data)

    def retrieve(self, request, pk=None):
        category = get_category(tenant_id=get_request_tenant_id(request), category_id=pk)
        return Response(IssueCategorySerializer(category).data)

    def create(self, request):
        ser = IssueCategoryCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        category = IssueCategoryService.create(tenant_id=get_request_tenant_id(request), name=ser.validated_data["name"])
        return Response(IssueCategorySerializer(category).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = IssueCategoryUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        category = IssueCategoryService.update(tenant_id=get_request_tenant_id(request), category_id=pk, **ser.validated_data)
        return Response(IssueCategorySerializer(category).data)

    def update(self, request, pk=None):
        return self.partial_update(request, pk=pk)

    def destroy(self, request, pk=None):
        IssueCategoryService.delete(tenant_id=get_request_tenant_id(request), category_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
