# condo_core/subscriptions/billing.py
"""
Thin wrapper over the Stripe SDK.

Every call passes the API key explicitly so tests and deployments can swap
settings without touching the module-level `stripe.api_key`.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Optional

import stripe
from django.conf import settings
from rest_framework import status
from rest_framework.exceptions import APIException

logger = logging.getLogger(__name__)


class BillingNotConfigured(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Billing is not configured."
    default_code = "billing_not_configured"


class BillingProviderError(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Billing provider request failed."
    default_code = "billing_provider_error"


def billing_configured() -> bool:
    return bool(settings.STRIPE_SECRET_KEY)


def webhook_configured() -> bool:
    return bool(settings.STRIPE_WEBHOOK_SECRET)


def price_id_for(plan: str) -> str:
    return (settings.STRIPE_PRICE_IDS or {}).get(plan, "") or ""


def _api_key() -> str:
    if not billing_configured():
        raise BillingNotConfigured()
    return settings.STRIPE_SECRET_KEY


def create_customer(*, name: str, tenant_id: str, email: Optional[str] = None) -> str:
    try:
        customer = stripe.Customer.create(
            api_key=_api_key(),
            name=name,
            email=email or None,
            metadata={"tenant_id": tenant_id},
        )
    except stripe.StripeError as e:
        logger.error("Stripe customer creation failed for tenant %s: %s", tenant_id, e)
        raise BillingProviderError() from e
    return customer.id


def create_checkout_session(
    *,
    customer_id: str,
    price_id: str,
    metadata: dict[str, str],
    success_url: str,
    cancel_url: str,
) -> str:
    """Subscription-mode checkout; returns the hosted page URL."""
    try:
        session = stripe.checkout.Session.create(
            api_key=_api_key(),
            customer=customer_id,
            mode="subscription",
            payment_method_types=["card"],
            line_items=[{"price": price_id, "quantity": 1}],
            success_url=success_url,
            cancel_url=cancel_url,
            metadata=metadata,
            subscription_data={"metadata": metadata},
        )
    except stripe.StripeError as e:
        logger.error("Stripe checkout session failed for customer %s: %s", customer_id, e)
        raise BillingProviderError() from e
    return session.url


def create_portal_session(*, customer_id: str, return_url: str) -> str:
    try:
        session = stripe.billing_portal.Session.create(
            api_key=_api_key(),
            customer=customer_id,
            return_url=return_url,
        )
    except stripe.StripeError as e:
        logger.error("Stripe portal session failed for customer %s: %s", customer_id, e)
        raise BillingProviderError() from e
    return session.url


def construct_event(payload: bytes, signature: str) -> dict[str, Any]:
    """
    Verifies the Stripe-Signature header against the raw body.
    Raises ValueError (bad payload) or stripe.SignatureVerificationError.
    Handlers get the event as plain dicts.
    """
    stripe.Webhook.construct_event(payload, signature, settings.STRIPE_WEBHOOK_SECRET)
    return json.loads(payload)
