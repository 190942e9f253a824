# condo_core/residents/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES, MANAGER_ROLES, ROLE_RESIDENT, STAFF_ROLES

MANAGER_OR_RESIDENT = MANAGER_ROLES | {ROLE_RESIDENT}


class ResidentPermission(BaseRolePermission):
    """Permissions for Resident management"""
    allowed_roles_per_action = {
        "list": STAFF_ROLES,
        "by_unit": STAFF_ROLES,
        "retrieve": ALL_ROLES,
        "me": ALL_ROLES,
        "update": MANAGER_OR_RESIDENT,
        "partial_update": MANAGER_OR_RESIDENT,
        "destroy": MANAGER_ROLES,
        "activate": MANAGER_ROLES,
        "deactivate": MANAGER_ROLES,
        "add_sub_record": MANAGER_OR_RESIDENT,
        "remove_sub_record": MANAGER_OR_RESIDENT,
    }


class InvitePermission(BaseRolePermission):
    """Permissions for resident invites"""
    allowed_roles_per_action = {
        "list": MANAGER_ROLES,
        "create": MANAGER_ROLES,
        "resend": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
    }
