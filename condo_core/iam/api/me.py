# condo_core/iam/api/me.py

from __future__ import annotations

from django.core.exceptions import ObjectDoesNotExist
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from condo_core.iam.api.schema_serializers import (
    MeResponseSerializer,
    ScopeSwitchRequestSerializer,
    ScopeSwitchResponseSerializer,
)
from condo_core.iam.scope import NOT_A_MEMBER_MSG, apply_scope_from_headers, user_can_access_tenant
from condo_core.iam.services.membership import list_user_tenants


def user_payload(user) -> dict:
    try:
        profile = user.profile
    except ObjectDoesNotExist:
        profile = None

    return {
        "id": user.id,
        "email": getattr(user, "email", None),
        "name": profile.name if profile else None,
        "role": profile.role if profile else None,
        "tenant_id": str(profile.tenant_id) if profile and profile.tenant_id else None,
        "is_superuser": bool(getattr(user, "is_superuser", False)),
    }


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: MeResponseSerializer}, tags=["IAM"], operation_id="me_retrieve")
    def get(self, request):
        """
        Returns user profile + memberships.
        The scope header is OPTIONAL here; if provided it must be valid and
        the user must be a member, else 400/403.
        """
        scope = apply_scope_from_headers(request) or getattr(request, "scope", None)
        active_scope = {"tenant_id": str(scope.tenant_id)} if scope else None

        return Response(
            {
                "user": user_payload(request.user),
                "memberships": list_user_tenants(request.user.id),
                "active_scope": active_scope,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        request=ScopeSwitchRequestSerializer,
        responses={200: ScopeSwitchResponseSerializer},
        tags=["IAM"],
        operation_id="me_switch_tenant",
    )
    def post(self, request):
        """
        Switch active tenant.
        The server cannot set headers for the client; the client sends
        X-Tenant-Id with the returned scope on subsequent requests.
        """
        s = ScopeSwitchRequestSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        tenant_id = s.validated_data["tenant_id"]

        if not user_can_access_tenant(request.user, tenant_id):
            raise PermissionDenied(NOT_A_MEMBER_MSG)

        return Response(
            {
                "message": "Scope switched successfully",
                "active_scope": {"tenant_id": str(tenant_id)},
            },
            status=status.HTTP_200_OK,
        )
