# condo_core/iam/api/users.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.db.models import Q
from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from condo_core.common.api.pagination import paginate
from condo_core.common.permissions import SaasAdminPermission
from condo_core.iam.api.serializers import (
    MembershipRequestSerializer,
    UserCreateSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from condo_core.iam.services.users import UserService, get_user


@extend_schema_view(
    list=extend_schema(tags=["Users"], operation_id="v1_users_list", responses={200: UserSerializer(many=True)}),
    retrieve=extend_schema(tags=["Users"], operation_id="v1_users_retrieve", responses={200: UserSerializer}),
    create=extend_schema(tags=["Users"], operation_id="v1_users_create", request=UserCreateSerializer, responses={201: UserSerializer}),
    partial_update=extend_schema(tags=["Users"], operation_id="v1_users_update", request=UserUpdateSerializer, responses={200: UserSerializer}),
    add_membership=extend_schema(tags=["Users"], operation_id="v1_users_add_membership", request=MembershipRequestSerializer, responses={200: UserSerializer}),
    remove_membership=extend_schema(tags=["Users"], operation_id="v1_users_remove_membership", request=MembershipRequestSerializer, responses={200: UserSerializer}),
)
class UsersViewSet(viewsets.ViewSet):
    """
    SaaS-admin user management. No tenant scope.
    """

    permission_classes = [SaasAdminPermission]
    tenant_scoped = False
    lookup_value_regex = r"\d+"

    serializer_class = UserSerializer
    queryset = get_user_model().objects.none()

    def list(self, request):
        qs = (
            get_user_model()
            .objects.select_related("profile", "profile__tenant")
            .order_by("email")
        )
        q = request.query_params.get("search")
        if q:
            qs = qs.filter(Q(email__icontains=q) | Q(profile__name__icontains=q))
        return paginate(request, qs, UserSerializer)

    def retrieve(self, request, pk=None):
        return Response(UserSerializer(get_user(user_id=int(pk))).data)

    def create(self, request):
        ser = UserCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data

        user = UserService.create_or_update(
            email=d["email"],
            name=d.get("name") or None,
            role=d.get("role"),
            tenant_id=d.get("tenant_id"),
            external_id=d.get("external_id"),
        )
        return Response(UserSerializer(get_user(user_id=user.id)).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        ser = UserUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        d = ser.validated_data

        user = UserService.update(
            user_id=int(pk),
            name=d.get("name"),
            role=d.get("role"),
            tenant_id=d.get("tenant_id"),
            clear_tenant="tenant_id" in d and d["tenant_id"] is None,
        )
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=["post"], url_path="memberships")
    def add_membership(self, request, pk=None):
        ser = MembershipRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        UserService.add_membership(user_id=int(pk), tenant_id=ser.validated_data["tenant_id"])
        return Response(UserSerializer(get_user(user_id=int(pk))).data)

    @action(detail=True, methods=["post"], url_path="memberships/remove")
    def remove_membership(self, request, pk=None):
        ser = MembershipRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        UserService.remove_membership(user_id=int(pk), tenant_id=ser.validated_data["tenant_id"])
        return Response(UserSerializer(get_user(user_id=int(pk))).data)
