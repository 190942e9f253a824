# condo_core/common/permissions.py
from __future__ import annotations

from rest_framework.permissions import SAFE_METHODS, BasePermission

from condo_core.iam.roles import ALL_ROLES, MANAGER_ROLES, ROLE_SAAS_ADMIN, user_roles
from condo_core.iam.scope import NOT_A_MEMBER_MSG, attach_scope, require_scope, user_can_access_tenant

NOT_REGISTERED_MSG = "User is not registered."
DEFAULT_DENIED_MSG = "You do not have permission to perform this action."

METHOD_ACTIONS = {
    "POST": "create",
    "PUT": "update",
    "PATCH": "partial_update",
    "DELETE": "destroy",
}


def is_detail_view(view) -> bool:
    kwargs = getattr(view, "kwargs", None) or {}
    return "pk" in kwargs or "id" in kwargs


def request_action(request, view) -> str | None:
    """view.action for ViewSets; derived from the HTTP method for plain APIViews."""
    action = getattr(view, "action", None)
    if action:
        return action
    if request.method in SAFE_METHODS:
        return "retrieve" if is_detail_view(view) else "list"
    return METHOD_ACTIONS.get(request.method)


class BaseRolePermission(BasePermission):
    """
    Role-based access per action, on top of tenant scope.

    Order of checks: authenticated, has a role (403 "User is not registered."),
    tenant scope when `requires_tenant` (400 missing/invalid, 403 non-member),
    then `allowed_roles_per_action`. SAAS_ADMIN passes the role table.
    Actions missing from the table are denied, except safe methods which
    fall back to the list/retrieve entry.
    """

    message = DEFAULT_DENIED_MSG
    requires_tenant = True

    allowed_roles_per_action = {
        "list": ALL_ROLES,
        "retrieve": ALL_ROLES,
        "create": MANAGER_ROLES,
        "update": MANAGER_ROLES,
        "partial_update": MANAGER_ROLES,
        "destroy": MANAGER_ROLES,
    }

    def roles_for(self, request, view):
        allowed = self.allowed_roles_per_action.get(request_action(request, view))
        if allowed is None and request.method in SAFE_METHODS:
            allowed = self.allowed_roles_per_action.get("retrieve" if is_detail_view(view) else "list")
        return allowed

    def has_permission(self, request, view) -> bool:
        self.message = DEFAULT_DENIED_MSG
        user = request.user
        if not user or not user.is_authenticated:
            return False

        roles = user_roles(user)
        if not roles:
            self.message = NOT_REGISTERED_MSG
            return False

        if self.requires_tenant:
            scope = require_scope(request)
            if not user_can_access_tenant(user, scope.tenant_id):
                self.message = NOT_A_MEMBER_MSG
                return False
            attach_scope(request, scope)

        if ROLE_SAAS_ADMIN in roles:
            return True

        allowed = self.roles_for(request, view)
        return bool(allowed and roles & allowed)

    def has_object_permission(self, request, view, obj) -> bool:
        return self.has_permission(request, view)


class SaasAdminPermission(BaseRolePermission):
    """Admin-level endpoints: no tenant scope, SAAS_ADMIN only."""

    requires_tenant = False
    allowed_roles_per_action: dict = {}
