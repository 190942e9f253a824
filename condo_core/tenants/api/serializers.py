# condo_core/tenants/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.tenants.models import Tenant, slug_validator


class TenantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Tenant
        fields = [
            "id",
            "name",
            "slug",
            "active",
            "plan",
            "subscription_status",
            "max_units",
            "trial_ends_at",
            "current_period_end",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class TenantCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    slug = serializers.CharField(max_length=100, validators=[slug_validator])


class TenantUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    slug = serializers.CharField(max_length=100, required=False, validators=[slug_validator])
