# condo_core/iam/services/membership.py
from __future__ import annotations

from uuid import UUID

from condo_core.iam.models import UserTenant


def list_user_tenants(user_id: int) -> list[dict]:
    """
    Return tenant memberships for /me and /session/bootstrap.

    Membership graph:
      auth_user -> UserTenant -> Tenant
    """
    qs = (
        UserTenant.objects.select_related("tenant")
        .filter(user_id=user_id)
        .order_by("tenant__name")
    )

    items: list[dict] = []
    for m in qs:
        t = m.tenant
        items.append(
            {
                "tenant_id": str(t.id),
                "tenant_slug": t.slug,
                "tenant_name": t.name,
                "active": t.active,
                "joined_at": m.created_at.isoformat() if m.created_at else None,
            }
        )
    return items


def is_user_member_of_tenant(*, user_id: int, tenant_id: UUID) -> bool:
    """
    Validate user -> tenant membership.
    This is the single source of truth used by scope enforcement.
    """
    return UserTenant.objects.filter(user_id=user_id, tenant_id=tenant_id).exists()
