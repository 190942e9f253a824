# condo_core/subscriptions/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.tenants.models import SubscriptionStatus, TenantPlan


class PlanSerializer(serializers.Serializer):
    key = serializers.ChoiceField(choices=TenantPlan.choices)
    name = serializers.CharField()
    max_units = serializers.IntegerField()
    price_monthly = serializers.IntegerField(help_text="Price in cents per month.")
    features = serializers.ListField(child=serializers.CharField())


class TenantSubscriptionSerializer(serializers.Serializer):
    plan = serializers.ChoiceField(choices=TenantPlan.choices)
    status = serializers.ChoiceField(choices=SubscriptionStatus.choices)
    max_units = serializers.IntegerField()
    current_units = serializers.IntegerField()
    current_period_end = serializers.DateTimeField(allow_null=True)
    cancel_at_period_end = serializers.BooleanField()


class SubscriptionOverviewSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    tenant_name = serializers.CharField()
    plan = serializers.ChoiceField(choices=TenantPlan.choices)
    status = serializers.ChoiceField(choices=SubscriptionStatus.choices)
    max_units = serializers.IntegerField()
    current_units = serializers.IntegerField()
    current_period_end = serializers.DateTimeField(allow_null=True)
    billing_customer_id = serializers.CharField(allow_null=True)


class ChangePlanSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    plan = serializers.ChoiceField(choices=TenantPlan.choices)


class WebhookAckSerializer(serializers.Serializer):
    received = serializers.BooleanField()
    handled = serializers.BooleanField()


class CheckoutSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    plan = serializers.ChoiceField(choices=TenantPlan.choices)
    success_url = serializers.URLField(required=False)
    cancel_url = serializers.URLField(required=False)


class PortalSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    return_url = serializers.URLField(required=False)


class BillingUrlSerializer(serializers.Serializer):
    url = serializers.URLField()
