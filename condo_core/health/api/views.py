# condo_core/health/api/views.py
from __future__ import annotations

from django.conf import settings
from django.utils import timezone
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from condo_core.health.checks import check_database


def _base_payload(status_value: str) -> dict:
    return {
        "status": status_value,
        "timestamp": timezone.now().isoformat(),
        "version": settings.SPECTACULAR_SETTINGS.get("VERSION", ""),
    }


class HealthView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    @extend_schema(tags=["Health"], operation_id="v1_health", responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response(_base_payload("ok"))


class DetailedHealthView(APIView):
    """Also round-trips the database; any failing check turns the answer into a 503."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    @extend_schema(tags=["Health"], operation_id="v1_health_detailed", responses={200: OpenApiTypes.OBJECT, 503: OpenApiTypes.OBJECT})
    def get(self, request):
        checks = {"database": check_database()}
        healthy = all(c["status"] == "ok" for c in checks.values())

        payload = _base_payload("ok" if healthy else "error")
        payload["checks"] = checks
        return Response(payload, status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE)
