# condo_core/reservations/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES, STAFF_ROLES


class CommonAreaPermission(BaseRolePermission):
    """Reads for every member, writes for managers (base defaults)."""


class ReservationPermission(BaseRolePermission):
    # owner/staff checks for status changes live in ReservationService
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "by_area": ALL_ROLES,
        "create": ALL_ROLES,
        "update_status": ALL_ROLES,
        "destroy": STAFF_ROLES,
    }
