# condo_core/iam/api/schema_serializers.py
from __future__ import annotations

from rest_framework import serializers


class LoginRequestSerializer(serializers.Serializer):
    # accounts are keyed by email; username is accepted for staff created via admin
    username = serializers.CharField(required=False)
    email = serializers.EmailField(required=False)
    password = serializers.CharField()


class DetailResponseSerializer(serializers.Serializer):
    detail = serializers.CharField()


class MeUserSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    email = serializers.EmailField(allow_null=True, required=False, allow_blank=True)
    name = serializers.CharField(allow_null=True, required=False)
    role = serializers.CharField(allow_null=True, required=False)
    tenant_id = serializers.UUIDField(allow_null=True, required=False)
    is_superuser = serializers.BooleanField()


class MembershipSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
    tenant_slug = serializers.CharField()
    tenant_name = serializers.CharField()
    active = serializers.BooleanField()
    joined_at = serializers.DateTimeField(allow_null=True)


class ActiveScopeSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()


class MeResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    memberships = MembershipSerializer(many=True)
    active_scope = ActiveScopeSerializer(allow_null=True, required=False)


class TenantMiniSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    slug = serializers.CharField(allow_null=True, required=False)
    name = serializers.CharField(allow_null=True, required=False)


class SubscriptionSummarySerializer(serializers.Serializer):
    plan = serializers.CharField()
    status = serializers.CharField()
    max_units = serializers.IntegerField()
    current_units = serializers.IntegerField()
    current_period_end = serializers.DateTimeField(allow_null=True)
    cancel_at_period_end = serializers.BooleanField()


class SessionBootstrapResponseSerializer(serializers.Serializer):
    user = MeUserSerializer()
    memberships = MembershipSerializer(many=True)
    active_scope = ActiveScopeSerializer(allow_null=True, required=False)

    active_tenant = TenantMiniSerializer(allow_null=True, required=False)
    subscription = SubscriptionSummarySerializer(allow_null=True, required=False)

    server_time = serializers.DateTimeField(required=False)
    api_version = serializers.CharField(required=False)


class ScopeSwitchRequestSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()


class ScopeSwitchResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    active_scope = ActiveScopeSerializer()
