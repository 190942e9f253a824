# condo_core/tenants/permissions.py
from __future__ import annotations

from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ROLE_SYNDIC
from condo_core.iam.scope import user_can_access_tenant


class TenantPermission(BaseRolePermission):
    """
    Tenants are admin-level: no scope header.
    SYNDIC may read/update only tenants they belong to.
    """
    requires_tenant = False

    allowed_roles_per_action = {
        "list": set(),
        "by_slug": set(),
        "create": set(),
        "destroy": set(),
        "activate": set(),
        "deactivate": set(),
        "retrieve": {ROLE_SYNDIC},
        "update": {ROLE_SYNDIC},
        "partial_update": {ROLE_SYNDIC},
    }

    def has_object_permission(self, request, view, obj) -> bool:
        if not self.has_permission(request, view):
            return False
        return user_can_access_tenant(request.user, obj.id)
