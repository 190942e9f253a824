# condo_core/announcements/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES, MANAGER_ROLES


class AnnouncementPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "record_view": ALL_ROLES,
        "like": ALL_ROLES,
        "create": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
    }
