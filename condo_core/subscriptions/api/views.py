# condo_core/subscriptions/api/views.py
from __future__ import annotations

import logging

import stripe
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from condo_core.common.permissions import SaasAdminPermission
from condo_core.iam.scope import get_request_tenant_id
from condo_core.subscriptions import billing
from condo_core.subscriptions.api.serializers import (
    BillingUrlSerializer,
    ChangePlanSerializer,
    CheckoutSerializer,
    PlanSerializer,
    PortalSerializer,
    SubscriptionOverviewSerializer,
    TenantSubscriptionSerializer,
    WebhookAckSerializer,
)
from condo_core.subscriptions.permissions import TenantSubscriptionPermission
from condo_core.subscriptions.plans import get_plans
from condo_core.subscriptions.selectors import all_tenant_subscriptions, tenant_subscription_summary
from condo_core.subscriptions.services import BillingService, BillingWebhookService, SubscriptionService
from condo_core.tenants.api.serializers import TenantSerializer
from condo_core.tenants.selectors import get_tenant

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "Stripe-Signature"


class PlanListView(APIView):
    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    @extend_schema(tags=["Subscriptions"], operation_id="v1_subscriptions_plans", responses={200: PlanSerializer(many=True)})
    def get(self, request):
        return Response([p.as_dict() for p in get_plans()])


class CurrentSubscriptionView(APIView):
    permission_classes = [TenantSubscriptionPermission]

    @extend_schema(tags=["Subscriptions"], operation_id="v1_subscriptions_current", responses={200: TenantSubscriptionSerializer})
    def get(self, request):
        tenant = get_tenant(tenant_id=get_request_tenant_id(request))
        return Response(TenantSubscriptionSerializer(tenant_subscription_summary(tenant)).data)


class SubscriptionOverviewView(APIView):
    permission_classes = [SaasAdminPermission]
    tenant_scoped = False

    @extend_schema(
        tags=["Subscriptions"],
        operation_id="v1_subscriptions_overview",
        responses={200: SubscriptionOverviewSerializer(many=True)},
    )
    def get(self, request):
        return Response(SubscriptionOverviewSerializer(all_tenant_subscriptions(), many=True).data)


class ChangePlanView(APIView):
    permission_classes = [SaasAdminPermission]
    tenant_scoped = False

    @extend_schema(
        tags=["Subscriptions"],
        operation_id="v1_subscriptions_change_plan",
        request=ChangePlanSerializer,
        responses={200: TenantSerializer},
    )
    def post(self, request):
        ser = ChangePlanSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        t = SubscriptionService.change_plan(
            tenant_id=ser.validated_data["tenant_id"],
            plan=ser.validated_data["plan"],
        )
        return Response(TenantSerializer(t).data)


class CheckoutView(APIView):
    permission_classes = [SaasAdminPermission]
    tenant_scoped = False

    @extend_schema(
        tags=["Subscriptions"],
        operation_id="v1_subscriptions_checkout",
        request=CheckoutSerializer,
        responses={200: BillingUrlSerializer},
    )
    def post(self, request):
        ser = CheckoutSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        url = BillingService.start_checkout(**ser.validated_data)
        return Response({"url": url})


class PortalView(APIView):
    permission_classes = [SaasAdminPermission]
    tenant_scoped = False

    @extend_schema(
        tags=["Subscriptions"],
        operation_id="v1_subscriptions_portal",
        request=PortalSerializer,
        responses={200: BillingUrlSerializer},
    )
    def post(self, request):
        ser = PortalSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        url = BillingService.open_portal(**ser.validated_data)
        return Response({"url": url})


class BillingWebhookView(APIView):
    """
    Stripe webhook.
    The raw body is verified against the `Stripe-Signature` header with
    STRIPE_WEBHOOK_SECRET before any event is applied.
    """

    permission_classes = [AllowAny]
    authentication_classes: list = []
    tenant_scoped = False

    @extend_schema(
        tags=["Subscriptions"],
        operation_id="v1_subscriptions_webhook",
        request=None,
        responses={200: WebhookAckSerializer},
        auth=[],
    )
    def post(self, request):
        if not billing.webhook_configured():
            logger.warning("Billing webhook rejected: STRIPE_WEBHOOK_SECRET is not set")
            raise billing.BillingNotConfigured("Billing webhook is not configured.")

        signature = request.headers.get(SIGNATURE_HEADER, "")
        if not signature:
            raise ValidationError("Missing Stripe-Signature header.")

        try:
            event = billing.construct_event(request.body, signature)
        except ValueError:
            raise ValidationError("Invalid webhook payload.")
        except stripe.SignatureVerificationError:
            logger.warning("Billing webhook rejected: bad signature")
            raise ValidationError("Invalid webhook signature.")

        if not isinstance(event, dict) or not event.get("type"):
            raise ValidationError("Invalid webhook payload.")

        handled = BillingWebhookService.handle_event(event)
        return Response({"received": True, "handled": handled}, status=status.HTTP_200_OK)
