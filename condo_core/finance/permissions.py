# condo_core/finance/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import MANAGER_ROLES


class FinancePermission(BaseRolePermission):
    """Bookkeeping is restricted to the syndic"""
    allowed_roles_per_action = {
        "list": MANAGER_ROLES,
        "retrieve": MANAGER_ROLES,
        "create": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
        "summary": MANAGER_ROLES,
        "overview": MANAGER_ROLES,
        "export_csv": MANAGER_ROLES,
        "toggle": MANAGER_ROLES,
        "apply": MANAGER_ROLES,
    }
