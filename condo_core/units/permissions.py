# condo_core/units/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES, MANAGER_ROLES, STAFF_ROLES


class UnitPermission(BaseRolePermission):
    """Permissions for Unit management"""
    allowed_roles_per_action = {
        "list": STAFF_ROLES,
        "count": STAFF_ROLES,
        "retrieve": ALL_ROLES,
        "create": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
        "activate": MANAGER_ROLES,
        "deactivate": MANAGER_ROLES,
    }
