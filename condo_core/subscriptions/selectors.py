# condo_core/subscriptions/selectors.py
from __future__ import annotations

from condo_core.tenants.models import SubscriptionStatus, Tenant
from condo_core.units.models import Unit


def count_units(*, tenant_id) -> int:
    return Unit.objects.filter(tenant_id=tenant_id).count()


def tenant_subscription_summary(tenant: Tenant) -> dict:
    return {
        "plan": tenant.plan,
        "status": tenant.subscription_status,
        "max_units": tenant.max_units,
        "current_units": count_units(tenant_id=tenant.id),
        "current_period_end": tenant.current_period_end,
        "cancel_at_period_end": (
            tenant.subscription_status == SubscriptionStatus.CANCELED and tenant.current_period_end is not None
        ),
    }


def all_tenant_subscriptions() -> list[dict]:
    items: list[dict] = []
    for t in Tenant.objects.all().order_by("-created_at"):
        items.append(
            {
                "tenant_id": t.id,
                "tenant_name": t.name,
                "plan": t.plan,
                "status": t.subscription_status,
                "max_units": t.max_units,
                "current_units": count_units(tenant_id=t.id),
                "current_period_end": t.current_period_end,
                "billing_customer_id": t.billing_customer_id,
            }
        )
    return items
