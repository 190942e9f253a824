# condo_core/issues/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES, STAFF_ROLES


class IssuePermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": ALL_ROLES,
        "update": ALL_ROLES,
        "partial_update": ALL_ROLES,
        "destroy": STAFF_ROLES,
    }


class IssueCategoryPermission(BaseRolePermission):
    pass
