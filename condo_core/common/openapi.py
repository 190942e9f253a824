# condo_core/common/openapi.py
from __future__ import annotations

from drf_spectacular.openapi import AutoSchema
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter

TENANT_HEADER = OpenApiParameter(
    name="X-Tenant-Id",
    type=OpenApiTypes.UUID,
    location=OpenApiParameter.HEADER,
    required=True,
    description="Condominium (tenant) the request acts on.",
)

# admin-level apps whose views never take a tenant scope
UNSCOPED_MODULE_PREFIXES = (
    "condo_core.iam.api.",
    "condo_core.tenants.api.",
    "condo_core.health.",
    "drf_spectacular.",
)


def view_is_tenant_scoped(view) -> bool:
    if getattr(view, "tenant_scoped", True) is False:
        return False
    return not type(view).__module__.startswith(UNSCOPED_MODULE_PREFIXES)


class CondoAutoSchema(AutoSchema):
    """Documents the X-Tenant-Id header on every tenant-scoped operation."""

    def get_override_parameters(self):
        params = list(super().get_override_parameters() or [])
        if self.view is None or not view_is_tenant_scoped(self.view):
            return params
        if all(p.name.lower() != TENANT_HEADER.name.lower() for p in params if isinstance(p, OpenApiParameter)):
            params.append(TENANT_HEADER)
        return params
