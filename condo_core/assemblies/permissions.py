# condo_core/assemblies/permissions.py
from condo_core.common.permissions import BaseRolePermission
from condo_core.iam.roles import ALL_ROLES, MANAGER_ROLES, STAFF_ROLES


class AssemblyPermission(BaseRolePermission):
    """Assemblies: members read, syndic writes"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "upcoming": ALL_ROLES,
        "stats": ALL_ROLES,
        "attendance": ALL_ROLES,
        "attendance_participants": ALL_ROLES,
        "create": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
        "start": MANAGER_ROLES,
        "finish": MANAGER_ROLES,
        "cancel": MANAGER_ROLES,
        "generate_checkin_token": MANAGER_ROLES,
        "generate_otp": MANAGER_ROLES,
        "current_otp": MANAGER_ROLES,
        "pending_proxies": MANAGER_ROLES,
        "approve_proxy": MANAGER_ROLES,
        "reject_proxy": MANAGER_ROLES,
        "proxy_document": MANAGER_ROLES,
    }


class AgendaItemPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "result": ALL_ROLES,
        "votes": ALL_ROLES,
        "vote_summary": ALL_ROLES,
        "has_voted": ALL_ROLES,
        "cast_vote": STAFF_ROLES,
        "create": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
        "start_voting": MANAGER_ROLES,
        "close_voting": MANAGER_ROLES,
        "generate_otp": MANAGER_ROLES,
        "current_otp": MANAGER_ROLES,
    }


class ParticipantPermission(BaseRolePermission):
    """Doormen may register and mark presence; changes stay with the syndic"""
    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "attendance": ALL_ROLES,
        "create": STAFF_ROLES,
        "join": STAFF_ROLES,
        "leave": STAFF_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
    }


class MinutesPermission(BaseRolePermission):
    allowed_roles_per_action = {
        "retrieve": ALL_ROLES,
        "generate": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "approve": MANAGER_ROLES,
        "publish": MANAGER_ROLES,
    }
