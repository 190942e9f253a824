# condo_core/iam/scope.py
"""
Tenant scope: the X-Tenant-Id header, validated against the user's memberships.

Everything that reads the header (auth class, permissions, middleware, the
/me/ and bootstrap views) goes through this module so the three failure
modes stay consistent: missing -> 400, not a UUID -> 400, not a member -> 403.
"""
from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID

from rest_framework.exceptions import PermissionDenied, ValidationError

from condo_core.iam.roles import is_saas_admin
from condo_core.iam.services.membership import is_user_member_of_tenant

TENANT_HEADER = "X-Tenant-Id"

MISSING_SCOPE_MSG = "Missing scope header. Provide X-Tenant-Id."
INVALID_SCOPE_MSG = "Invalid scope header. Provide a valid UUID for X-Tenant-Id."
NOT_A_MEMBER_MSG = "You do not have access to the selected tenant."


@dataclass(frozen=True)
class Scope:
    tenant_id: UUID


def parse_tenant_id(value) -> UUID | None:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        return None


def read_scope(request) -> Scope | None:
    """None when the header is absent; 400 when it is not a UUID."""
    raw = request.headers.get(TENANT_HEADER) if hasattr(request, "headers") else None
    if not raw:
        return None
    tenant_id = parse_tenant_id(raw)
    if tenant_id is None:
        raise ValidationError(INVALID_SCOPE_MSG)
    return Scope(tenant_id=tenant_id)


def require_scope(request) -> Scope:
    scope = read_scope(request)
    if scope is None:
        raise ValidationError(MISSING_SCOPE_MSG)
    return scope


def user_can_access_tenant(user, tenant_id: UUID) -> bool:
    if user is None or not getattr(user, "is_authenticated", False):
        return False
    return is_saas_admin(user) or is_user_member_of_tenant(user_id=user.id, tenant_id=tenant_id)


def attach_scope(request, scope: Scope) -> None:
    request.scope = scope
    request.tenant_id = scope.tenant_id


def apply_scope_from_headers(request, user=None) -> Scope | None:
    """Validate and attach the header scope if one was sent; 403 for non-members."""
    scope = read_scope(request)
    if scope is None:
        return None
    if not user_can_access_tenant(user or getattr(request, "user", None), scope.tenant_id):
        raise PermissionDenied(NOT_A_MEMBER_MSG)
    attach_scope(request, scope)
    return scope


def get_request_tenant_id(request) -> UUID:
    tenant_id = getattr(request, "tenant_id", None)
    if tenant_id:
        return tenant_id
    scope = require_scope(request)
    attach_scope(request, scope)
    return scope.tenant_id
