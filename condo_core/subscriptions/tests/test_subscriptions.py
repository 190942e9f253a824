import hashlib
import hmac
import json
import time
from types import SimpleNamespace

import pytest
import stripe
from rest_framework.test import APIClient

from condo_core.tenants.models import SubscriptionStatus, TenantPlan

pytestmark = pytest.mark.django_db

WEBHOOK_URL = "/api/v1/subscriptions/webhook/"
WEBHOOK_SECRET = "whsec_test"


def sign(payload: bytes, secret: str = WEBHOOK_SECRET) -> str:
    ts = int(time.time())
    digest = hmac.new(secret.encode(), f"{ts}.".encode() + payload, hashlib.sha256).hexdigest()
    return f"t={ts},v1={digest}"


@pytest.fixture
def send_event(settings):
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    client = APIClient()

    def _send(event: dict, *, secret: str = WEBHOOK_SECRET):
        payload = json.dumps(event).encode()
        return client.post(
            WEBHOOK_URL,
            data=payload,
            content_type="application/json",
            HTTP_STRIPE_SIGNATURE=sign(payload, secret),
        )

    return _send


@pytest.fixture
def stripe_calls(settings, monkeypatch):
    """Stubs the Stripe SDK calls made by checkout and the portal."""
    settings.STRIPE_SECRET_KEY = "sk_test_123"
    settings.STRIPE_PRICE_IDS = {"BASIC": "price_basic", "PROFESSIONAL": "price_pro", "ENTERPRISE": ""}
    calls = {"customer": [], "checkout": [], "portal": []}

    def create_customer(**kwargs):
        calls["customer"].append(kwargs)
        return SimpleNamespace(id="cus_new")

    def create_checkout(**kwargs):
        calls["checkout"].append(kwargs)
        return SimpleNamespace(id="cs_1", url="https://checkout.stripe.test/cs_1")

    def create_portal(**kwargs):
        calls["portal"].append(kwargs)
        return SimpleNamespace(id="bps_1", url="https://billing.stripe.test/bps_1")

    monkeypatch.setattr(stripe.Customer, "create", create_customer)
    monkeypatch.setattr(stripe.checkout.Session, "create", create_checkout)
    monkeypatch.setattr(stripe.billing_portal.Session, "create", create_portal)
    return calls


def test_plans_are_public():
    res = APIClient().get("/api/v1/subscriptions/plans/")
    assert res.status_code == 200

    plans = {p["key"]: p for p in res.json()}
    assert [plans[k]["max_units"] for k in ("STARTER", "BASIC", "PROFESSIONAL", "ENTERPRISE")] == [30, 60, 150, 500]
    assert [plans[k]["price_monthly"] for k in ("STARTER", "BASIC", "PROFESSIONAL", "ENTERPRISE")] == [0, 9900, 19900, 39900]


def test_current_subscription(resident_client, headers, unit):
    res = resident_client.get("/api/v1/subscriptions/current/", **headers)
    assert res.status_code == 200

    body = res.json()
    assert body["plan"] == "STARTER"
    assert body["status"] == "ACTIVE"
    assert body["current_units"] == 1
    assert body["cancel_at_period_end"] is False


def test_overview_and_change_plan_are_admin_only(syndic_client, admin_client, tenant):
    assert syndic_client.get("/api/v1/subscriptions/overview/").status_code == 403

    res = admin_client.post(
        "/api/v1/subscriptions/change-plan/",
        {"tenant_id": str(tenant.id), "plan": "PROFESSIONAL"},
        format="json",
    )
    assert res.status_code == 200
    assert res.json()["plan"] == "PROFESSIONAL"
    assert res.json()["max_units"] == 150

    overview = admin_client.get("/api/v1/subscriptions/overview/")
    assert overview.status_code == 200


# --- webhook ---


def test_webhook_rejects_missing_signature(settings):
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    res = APIClient().post(WEBHOOK_URL, {"type": "invoice.payment_failed"}, format="json")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "validation_error"


def test_webhook_rejects_forged_signature(send_event, tenant):
    tenant.billing_subscription_id = "sub_1"
    tenant.plan = TenantPlan.BASIC
    tenant.save()

    res = send_event({"type": "customer.subscription.deleted", "data": {"object": {"id": "sub_1"}}}, secret="whsec_forged")
    assert res.status_code == 400

    tenant.refresh_from_db()
    assert tenant.plan == TenantPlan.BASIC
    assert tenant.billing_subscription_id == "sub_1"


def test_webhook_rejects_bearer_secret_without_signature(settings, tenant):
    settings.STRIPE_WEBHOOK_SECRET = WEBHOOK_SECRET
    tenant.billing_subscription_id = "sub_1"
    tenant.save()

    res = APIClient().post(
        WEBHOOK_URL,
        {"type": "customer.subscription.deleted", "data": {"object": {"id": "sub_1"}}},
        format="json",
        HTTP_AUTHORIZATION=f"Bearer {WEBHOOK_SECRET}",
    )
    assert res.status_code == 400

    tenant.refresh_from_db()
    assert tenant.billing_subscription_id == "sub_1"


def test_webhook_disabled_without_configured_secret(settings):
    settings.STRIPE_WEBHOOK_SECRET = ""
    payload = b'{"type": "x"}'
    res = APIClient().post(WEBHOOK_URL, data=payload, content_type="application/json", HTTP_STRIPE_SIGNATURE=sign(payload))
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "billing_not_configured"


def test_signed_payment_failed_is_applied(send_event, tenant):
    tenant.billing_subscription_id = "sub_1"
    tenant.save()

    res = send_event({"type": "invoice.payment_failed", "data": {"object": {"subscription": "sub_1"}}})
    assert res.status_code == 200
    assert res.json() == {"received": True, "handled": True}

    tenant.refresh_from_db()
    assert tenant.subscription_status == SubscriptionStatus.PAST_DUE


def test_webhook_lifecycle(send_event, tenant):
    checkout = {
        "type": "checkout.session.completed",
        "data": {"object": {"subscription": "sub_1", "customer": "cus_1", "metadata": {"tenant_id": str(tenant.id), "plan": "BASIC"}}},
    }
    res = send_event(checkout)
    assert res.status_code == 200
    assert res.json() == {"received": True, "handled": True}

    tenant.refresh_from_db()
    assert tenant.plan == TenantPlan.BASIC
    assert tenant.max_units == 60
    assert tenant.billing_subscription_id == "sub_1"
    assert tenant.billing_customer_id == "cus_1"

    send_event({"type": "customer.subscription.updated", "data": {"object": {"id": "sub_1", "status": "past_due", "current_period_end": 1767225600}}})
    tenant.refresh_from_db()
    assert tenant.subscription_status == SubscriptionStatus.PAST_DUE
    assert tenant.current_period_end.year == 2026

    send_event({"type": "customer.subscription.deleted", "data": {"object": {"id": "sub_1"}}})
    tenant.refresh_from_db()
    assert tenant.plan == TenantPlan.STARTER
    assert tenant.subscription_status == SubscriptionStatus.CANCELED
    assert tenant.max_units == 30
    assert tenant.billing_subscription_id is None


def test_unknown_webhook_event_is_ignored(send_event):
    res = send_event({"type": "customer.created", "data": {"object": {}}})
    assert res.status_code == 200
    assert res.json()["handled"] is False


# --- checkout / portal ---


def test_checkout_creates_customer_once(admin_client, tenant, stripe_calls, settings):
    body = {"tenant_id": str(tenant.id), "plan": "BASIC"}

    res = admin_client.post("/api/v1/subscriptions/checkout/", body, format="json")
    assert res.status_code == 200
    assert res.json() == {"url": "https://checkout.stripe.test/cs_1"}

    tenant.refresh_from_db()
    assert tenant.billing_customer_id == "cus_new"
    assert stripe_calls["customer"][0]["metadata"] == {"tenant_id": str(tenant.id)}

    session = stripe_calls["checkout"][0]
    assert session["customer"] == "cus_new"
    assert session["mode"] == "subscription"
    assert session["line_items"] == [{"price": "price_basic", "quantity": 1}]
    assert session["metadata"] == {"tenant_id": str(tenant.id), "plan": "BASIC"}
    assert session["subscription_data"] == {"metadata": {"tenant_id": str(tenant.id), "plan": "BASIC"}}
    assert session["success_url"] == f"{settings.CONDO_WEB_URL}/dashboard/billing?success=true"
    assert session["cancel_url"] == f"{settings.CONDO_WEB_URL}/dashboard/billing?canceled=true"

    # second checkout reuses the stored customer
    admin_client.post("/api/v1/subscriptions/checkout/", body, format="json")
    assert len(stripe_calls["customer"]) == 1
    assert stripe_calls["checkout"][1]["customer"] == "cus_new"


def test_checkout_rejections(admin_client, syndic_client, tenant, stripe_calls, settings):
    url = "/api/v1/subscriptions/checkout/"

    assert syndic_client.post(url, {"tenant_id": str(tenant.id), "plan": "BASIC"}, format="json").status_code == 403
    # free plan
    assert admin_client.post(url, {"tenant_id": str(tenant.id), "plan": "STARTER"}, format="json").status_code == 400
    # no price configured
    assert admin_client.post(url, {"tenant_id": str(tenant.id), "plan": "ENTERPRISE"}, format="json").status_code == 400
    assert (
        admin_client.post(url, {"tenant_id": "00000000-0000-0000-0000-000000000000", "plan": "BASIC"}, format="json").status_code
        == 404
    )

    settings.STRIPE_SECRET_KEY = ""
    assert admin_client.post(url, {"tenant_id": str(tenant.id), "plan": "BASIC"}, format="json").status_code == 400
    assert stripe_calls["checkout"] == []


def test_checkout_provider_failure_is_bad_gateway(admin_client, tenant, stripe_calls, monkeypatch):
    def fail(**kwargs):
        raise stripe.StripeError("card network down")

    monkeypatch.setattr(stripe.checkout.Session, "create", fail)

    res = admin_client.post("/api/v1/subscriptions/checkout/", {"tenant_id": str(tenant.id), "plan": "BASIC"}, format="json")
    assert res.status_code == 502
    assert res.json()["error"]["code"] == "billing_provider_error"


def test_portal_requires_customer(admin_client, tenant, stripe_calls, settings):
    url = "/api/v1/subscriptions/portal/"
    assert admin_client.post(url, {"tenant_id": str(tenant.id)}, format="json").status_code == 400

    tenant.billing_customer_id = "cus_1"
    tenant.save()

    res = admin_client.post(url, {"tenant_id": str(tenant.id)}, format="json")
    assert res.status_code == 200
    assert res.json() == {"url": "https://billing.stripe.test/bps_1"}
    assert stripe_calls["portal"] == [{"api_key": "sk_test_123", "customer": "cus_1", "return_url": f"{settings.CONDO_WEB_URL}/dashboard/billing"}]
