# condo_core/iam/api/session.py

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from condo_core.iam.api.me import user_payload
from condo_core.iam.api.schema_serializers import SessionBootstrapResponseSerializer
from condo_core.iam.scope import apply_scope_from_headers
from condo_core.iam.services.membership import list_user_tenants
from condo_core.subscriptions.selectors import tenant_subscription_summary
from condo_core.tenants.selectors import get_tenant_or_none


class SessionBootstrapView(APIView):
    """
    Frontend bootstrap endpoint.

    - Requires auth (cookie or header JWT).
    - Scope header OPTIONAL.
      - If provided -> validated + membership enforced.
      - If not provided -> the first membership (by tenant name) is chosen.
    - Returns everything needed for UI initialization.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(
        responses={200: SessionBootstrapResponseSerializer},
        tags=["IAM"],
        operation_id="session_bootstrap",
        parameters=[
            OpenApiParameter(name="X-Tenant-Id", location=OpenApiParameter.HEADER, required=False, type=OpenApiTypes.UUID),
        ],
    )
    def get(self, request):
        memberships = list_user_tenants(request.user.id)

        scope = apply_scope_from_headers(request)
        if scope is not None:
            active_tenant_id = scope.tenant_id
        elif memberships:
            active_tenant_id = memberships[0]["tenant_id"]
        else:
            active_tenant_id = None

        active_scope = None
        active_tenant = None
        subscription = None

        tenant = get_tenant_or_none(tenant_id=active_tenant_id) if active_tenant_id else None
        if tenant is not None:
            active_scope = {"tenant_id": str(tenant.id)}
            active_tenant = {"id": str(tenant.id), "slug": tenant.slug, "name": tenant.name}
            subscription = tenant_subscription_summary(tenant)

        return Response(
            {
                "user": user_payload(request.user),
                "memberships": memberships,
                "active_scope": active_scope,
                "active_tenant": active_tenant,
                "subscription": subscription,
                "server_time": timezone.now(),
                "api_version": "0.1.0",
            }
        )
