# condo_core/units/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.units.models import Unit, UnitStatus


class UnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = Unit
        fields = [
            "id",
            "tenant_id",
            "block",
            "number",
            "identifier",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class UnitCreateSerializer(serializers.Serializer):
    block = serializers.CharField(max_length=50)
    number = serializers.CharField(max_length=50)
    identifier = serializers.CharField(max_length=100, required=False, allow_blank=True)


class UnitUpdateSerializer(serializers.Serializer):
    block = serializers.CharField(max_length=50, required=False)
    number = serializers.CharField(max_length=50, required=False)
    identifier = serializers.CharField(max_length=100, required=False)
    status = serializers.ChoiceField(choices=UnitStatus.choices, required=False)


class UnitCountSerializer(serializers.Serializer):
    count = serializers.IntegerField()
