# condo_core/iam/api/serializers.py
from __future__ import annotations

from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from rest_framework import serializers

from condo_core.iam.models import UserRole, UserTenant
from condo_core.tenants.models import Tenant


class TenantSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = ["id", "name", "slug", "active", "plan"]
        read_only_fields = fields


class UserTenantSerializer(serializers.ModelSerializer):
    tenant = TenantSummarySerializer(read_only=True)

    class Meta:
        model = UserTenant
        fields = ["id", "tenant", "created_at"]
        read_only_fields = fields


class UserSerializer(serializers.ModelSerializer):
    name = serializers.SerializerMethodField()
    role = serializers.SerializerMethodField()
    external_id = serializers.SerializerMethodField()
    tenant = serializers.SerializerMethodField()
    memberships = serializers.SerializerMethodField()

    class Meta:
        model = get_user_model()
        fields = [
            "id",
            "email",
            "name",
            "role",
            "external_id",
            "is_active",
            "tenant",
            "memberships",
            "date_joined",
        ]
        read_only_fields = fields

    def _profile(self, obj):
        try:
            return obj.profile
        except ObjectDoesNotExist:
            return None

    def get_name(self, obj):
        p = self._profile(obj)
        return p.name if p else None

    def get_role(self, obj):
        p = self._profile(obj)
        return p.role if p else None

    def get_external_id(self, obj):
        p = self._profile(obj)
        return p.external_id if p else None

    def get_tenant(self, obj):
        p = self._profile(obj)
        if p is None or p.tenant is None:
            return None
        return TenantSummarySerializer(p.tenant).data

    def get_memberships(self, obj):
        qs = obj.tenant_memberships.select_related("tenant").order_by("tenant__name")
        return UserTenantSerializer(qs, many=True).data


class UserCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    tenant_id = serializers.UUIDField(required=False)
    external_id = serializers.CharField(max_length=255, required=False)


class UserUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
    tenant_id = serializers.UUIDField(required=False, allow_null=True)


class MembershipRequestSerializer(serializers.Serializer):
    tenant_id = serializers.UUIDField()
