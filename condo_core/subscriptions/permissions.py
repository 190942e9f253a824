# condo_core/subscriptions/permissions.py
from __future__ import annotations

from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES


class TenantSubscriptionPermission(BaseRolePermission):
    """Any tenant member can read the tenant's subscription."""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
    }
