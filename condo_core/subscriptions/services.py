# condo_core/subscriptions/services.py
from __future__ import annotations

import logging
from datetime import datetime, timezone as dt_timezone
from typing import Any, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction
from rest_framework.exceptions import PermissionDenied, ValidationError

from condo_core.subscriptions import billing
from condo_core.subscriptions.plans import get_plan_config
from condo_core.subscriptions.selectors import count_units
from condo_core.tenants.models import SubscriptionStatus, Tenant, TenantPlan
from condo_core.tenants.selectors import get_tenant, get_tenant_or_none

logger = logging.getLogger(__name__)

# provider status -> tenant subscription status
STATUS_MAP = {
    "active": SubscriptionStatus.ACTIVE,
    "trialing": SubscriptionStatus.TRIALING,
    "past_due": SubscriptionStatus.PAST_DUE,
    "canceled": SubscriptionStatus.CANCELED,
    "unpaid": SubscriptionStatus.UNPAID,
}


def check_unit_limit(*, tenant_id: UUID) -> None:
    """
    Raises 403 when the tenant already holds max_units units.
    Unknown tenants are not limited here (FKs reject them later).
    """
    tenant = get_tenant_or_none(tenant_id=tenant_id)
    if tenant is None:
        return

    current = count_units(tenant_id=tenant_id)
    if current >= tenant.max_units:
        raise PermissionDenied(
            f"Limit of {tenant.max_units} units reached. Upgrade your plan to add more units."
        )


def _from_epoch(value) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value), tz=dt_timezone.utc)


def _tenant_by_subscription(subscription_id: Optional[str]) -> Optional[Tenant]:
    if not subscription_id:
        return None
    return Tenant.objects.select_for_update().filter(billing_subscription_id=subscription_id).first()


class SubscriptionService:
    @staticmethod
    @transaction.atomic
    def change_plan(*, tenant_id: UUID, plan: str) -> Tenant:
        cfg = get_plan_config(plan)
        get_tenant(tenant_id=tenant_id)
        t = Tenant.objects.select_for_update().get(id=tenant_id)

        old = t.plan
        t.plan = cfg.key
        t.max_units = cfg.max_units
        t.save(update_fields=["plan", "max_units", "updated_at"])

        logger.info("Tenant %s plan changed %s -> %s (max_units=%s)", t.id, old, t.plan, t.max_units)
        return t


def _billing_url(path: str) -> str:
    return f"{settings.CONDO_WEB_URL.rstrip('/')}{path}"


class BillingService:
    """Stripe checkout and customer-portal sessions for SaaS admins."""

    @staticmethod
    def start_checkout(
        *,
        tenant_id: UUID,
        plan: str,
        success_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> str:
        if not billing.billing_configured():
            raise ValidationError("Billing is not configured.")

        cfg = get_plan_config(plan)
        if cfg.price_monthly == 0:
            raise ValidationError("The STARTER plan is free and needs no checkout.")

        price_id = billing.price_id_for(cfg.key)
        if not price_id:
            raise ValidationError(f"No Stripe price configured for plan {cfg.key}.")

        tenant = get_tenant(tenant_id=tenant_id)
        customer_id = BillingService._ensure_customer(tenant)

        url = billing.create_checkout_session(
            customer_id=customer_id,
            price_id=price_id,
            metadata={"tenant_id": str(tenant.id), "plan": cfg.key},
            success_url=success_url or _billing_url("/dashboard/billing?success=true"),
            cancel_url=cancel_url or _billing_url("/dashboard/billing?canceled=true"),
        )
        logger.info("Checkout started for tenant %s (plan %s)", tenant.id, cfg.key)
        return url

    @staticmethod
    def open_portal(*, tenant_id: UUID, return_url: Optional[str] = None) -> str:
        if not billing.billing_configured():
            raise ValidationError("Billing is not configured.")

        tenant = get_tenant(tenant_id=tenant_id)
        if not tenant.billing_customer_id:
            raise ValidationError("Tenant has no billing customer yet.")

        return billing.create_portal_session(
            customer_id=tenant.billing_customer_id,
            return_url=return_url or _billing_url("/dashboard/billing"),
        )

    @staticmethod
    @transaction.atomic
    def _ensure_customer(tenant: Tenant) -> str:
        t = Tenant.objects.select_for_update().get(id=tenant.id)
        if t.billing_customer_id:
            return t.billing_customer_id

        t.billing_customer_id = billing.create_customer(name=t.name, tenant_id=str(t.id))
        t.save(update_fields=["billing_customer_id", "updated_at"])
        logger.info("Billing customer %s created for tenant %s", t.billing_customer_id, t.id)
        return t.billing_customer_id


class BillingWebhookService:
    """
    Applies billing-provider events to tenants.
    Event shape: {"type": "...", "data": {"object": {...}}}
    """

    @staticmethod
    def handle_event(event: dict[str, Any]) -> bool:
        """
        Returns True when the event type is handled, False when ignored.
        """
        event_type = event.get("type") or ""
        obj = ((event.get("data") or {}).get("object")) or {}
        logger.info("Billing webhook received: %s", event_type)

        handler = {
            "checkout.session.completed": BillingWebhookService._checkout_completed,
            "customer.subscription.updated": BillingWebhookService._subscription_updated,
            "customer.subscription.deleted": BillingWebhookService._subscription_deleted,
            "invoice.payment_failed": BillingWebhookService._payment_failed,
        }.get(event_type)

        if handler is None:
            logger.info("Billing webhook ignored: %s", event_type)
            return False

        handler(obj)
        return True

    @staticmethod
    @transaction.atomic
    def _checkout_completed(obj: dict) -> None:
        metadata = obj.get("metadata") or {}
        tenant_id = metadata.get("tenant_id") or metadata.get("tenantId")
        plan = metadata.get("plan")

        if not tenant_id or not plan:
            logger.warning("Checkout completed without tenant/plan metadata")
            return

        cfg = get_plan_config(plan)
        t = Tenant.objects.select_for_update().filter(id=tenant_id).first()
        if t is None:
            logger.warning("Checkout completed for unknown tenant %s", tenant_id)
            return

        t.plan = cfg.key
        t.subscription_status = SubscriptionStatus.ACTIVE
        t.billing_subscription_id = obj.get("subscription") or t.billing_subscription_id
        t.max_units = cfg.max_units
        update_fields = ["plan", "subscription_status", "billing_subscription_id", "max_units", "updated_at"]

        if obj.get("customer"):
            t.billing_customer_id = obj["customer"]
            update_fields.append("billing_customer_id")

        t.save(update_fields=update_fields)
        logger.info("Tenant %s moved to plan %s", t.id, t.plan)

    @staticmethod
    @transaction.atomic
    def _subscription_updated(obj: dict) -> None:
        t = _tenant_by_subscription(obj.get("id"))
        if t is None:
            logger.warning("No tenant for subscription %s", obj.get("id"))
            return

        t.subscription_status = STATUS_MAP.get(obj.get("status"), SubscriptionStatus.ACTIVE)
        update_fields = ["subscription_status", "updated_at"]

        period_end = obj.get("current_period_end")
        if period_end is None:
            items = (obj.get("items") or {}).get("data") or []
            if items:
                period_end = items[0].get("current_period_end")
        if period_end:
            t.current_period_end = _from_epoch(period_end)
            update_fields.append("current_period_end")

        t.save(update_fields=update_fields)
        logger.info("Tenant %s subscription status -> %s", t.id, t.subscription_status)

    @staticmethod
    @transaction.atomic
    def _subscription_deleted(obj: dict) -> None:
        t = _tenant_by_subscription(obj.get("id"))
        if t is None:
            return

        t.plan = TenantPlan.STARTER
        t.subscription_status = SubscriptionStatus.CANCELED
        t.billing_subscription_id = None
        t.max_units = settings.CONDO_DEFAULT_MAX_UNITS
        t.current_period_end = None
        t.save(
            update_fields=[
                "plan",
                "subscription_status",
                "billing_subscription_id",
                "max_units",
                "current_period_end",
                "updated_at",
            ]
        )
        logger.info("Tenant %s downgraded to STARTER (subscription canceled)", t.id)

    @staticmethod
    @transaction.atomic
    def _payment_failed(obj: dict) -> None:
        subscription_id = obj.get("subscription")
        if not subscription_id:
            details = (obj.get("parent") or {}).get("subscription_details") or {}
            subscription_id = details.get("subscription")

        t = _tenant_by_subscription(subscription_id)
        if t is None:
            return

        t.subscription_status = SubscriptionStatus.PAST_DUE
        t.save(update_fields=["subscription_status", "updated_at"])
        logger.warning("Payment failed for tenant %s", t.id)
