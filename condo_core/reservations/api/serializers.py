# condo_core/reservations/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.reservations.models import CommonArea, Reservation, ReservationStatus


class CommonAreaSerializer(serializers.ModelSerializer):
    class Meta:
        model = CommonArea
        fields = [
            "id",
            "tenant_id",
            "name",
            "description",
            "rules",
            "max_capacity",
            "active",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CommonAreaCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    description = serializers.CharField(required=False, allow_blank=True)
    rules = serializers.CharField(required=False, allow_blank=True)
    max_capacity = serializers.IntegerField(required=False, allow_null=True, min_value=1)


class CommonAreaUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    rules = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    max_capacity = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    active = serializers.BooleanField(required=False)


class ReservationSerializer(serializers.ModelSerializer):
    common_area_id = serializers.UUIDField(read_only=True)
    common_area_name = serializers.CharField(source="common_area.name", read_only=True)
    reserved_by_id = serializers.IntegerField(read_only=True)
    reserved_by_name = serializers.SerializerMethodField()
    approved_by_id = serializers.IntegerField(read_only=True, allow_null=True)

    class Meta:
        model = Reservation
        fields = [
            "id",
            "tenant_id",
            "common_area_id",
            "common_area_name",
            "reserved_by_id",
            "reserved_by_name",
            "reservation_date",
            "status",
            "notes",
            "approved_by_id",
            "approved_at",
            "rejection_reason",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_reserved_by_name(self, obj) -> str:
        user = obj.reserved_by
        return user.get_full_name() or user.get_username()


class ReservationCreateSerializer(serializers.Serializer):
    common_area_id = serializers.UUIDField()
    reservation_date = serializers.DateField()
    notes = serializers.CharField(required=False, allow_blank=True)


class ReservationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=ReservationStatus.choices)
    rejection_reason = serializers.CharField(required=False, allow_blank=True)
