# condo_core/common/middleware.py
from __future__ import annotations

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from condo_core.common.api.exceptions import build_error_envelope
from condo_core.iam.scope import (
    INVALID_SCOPE_MSG,
    MISSING_SCOPE_MSG,
    NOT_A_MEMBER_MSG,
    Scope,
    attach_scope,
    parse_tenant_id,
    user_can_access_tenant,
)

SCOPE_SKIP = "skip"
SCOPE_OPTIONAL = "optional"
SCOPE_REQUIRED = "required"

API_PREFIXES = ("/api/v1/", "/api/")
UNGUARDED_PREFIXES = ("/admin/", "/api/docs/", "/api/schema/")

# relative to the /api[/v1]/ prefix
UNSCOPED_ROUTES = (
    "auth/",
    "health/",
    "tenants/",
    "users/",
    "subscriptions/plans/",
    "subscriptions/overview/",
    "subscriptions/change-plan/",
    "subscriptions/checkout/",
    "subscriptions/portal/",
    "subscriptions/webhook/",
    "invites/validate/",
    "invites/complete/",
    "assemblies/checkin/",
    "assemblies/checkout/",
    "assemblies/validate-checkin/",
    "assemblies/session/",
)
OPTIONAL_SCOPE_ROUTES = ("me/", "session/bootstrap/")


def scope_rule(path: str) -> str:
    if path.startswith(UNGUARDED_PREFIXES):
        return SCOPE_SKIP
    for prefix in API_PREFIXES:
        if path.startswith(prefix):
            route = path[len(prefix):]
            break
    else:
        return SCOPE_SKIP
    if not route or route.startswith(UNSCOPED_ROUTES):
        return SCOPE_SKIP
    if route.startswith(OPTIONAL_SCOPE_ROUTES):
        return SCOPE_OPTIONAL
    return SCOPE_REQUIRED


def scope_error(request, status: int, code: str, message: str) -> JsonResponse:
    return JsonResponse(build_error_envelope(request=request, code=code, message=message), status=status)


class TenantScopeMiddleware(MiddlewareMixin):
    """
    X-Tenant-Id handling for session-authenticated API calls.

    JWT calls reach here anonymous; CookieOrHeaderJWTAuthentication and
    BaseRolePermission scope those instead.
    """

    def process_request(self, request):
        request.scope = None
        request.tenant_id = None

        rule = scope_rule(request.path or "")
        if rule == SCOPE_SKIP:
            return None

        user = getattr(request, "user", None)
        if user is None or not user.is_authenticated:
            return None

        raw = request.META.get("HTTP_X_TENANT_ID")
        if not raw:
            if rule == SCOPE_OPTIONAL:
                return None
            return scope_error(request, 400, "validation_error", MISSING_SCOPE_MSG)

        tenant_id = parse_tenant_id(raw)
        if tenant_id is None:
            return scope_error(request, 400, "validation_error", INVALID_SCOPE_MSG)
        if not user_can_access_tenant(user, tenant_id):
            return scope_error(request, 403, "permission_denied", NOT_A_MEMBER_MSG)

        attach_scope(request, Scope(tenant_id=tenant_id))
        return None
