# condo_core/issues/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.issues.models import Issue, IssueCategory, IssuePriority, IssueStatus


def _display_name(user):
    if user is None:
        return None
    return user.get_full_name() or user.email or user.get_username()


class IssueCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = IssueCategory
        fields = ["id", "tenant_id", "name", "active", "created_at"]
        read_only_fields = fields


class IssueCategoryCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)


class IssueCategoryUpdateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    active = serializers.BooleanField(required=False)


class IssueSerializer(serializers.ModelSerializer):
    unit_id = serializers.UUIDField(read_only=True, allow_null=True)
    unit_identifier = serializers.CharField(source="unit.identifier", read_only=True, default=None)
    category_id = serializers.UUIDField(read_only=True, allow_null=True)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)
    created_by_id = serializers.IntegerField(read_only=True)
    created_by_name = serializers.SerializerMethodField()
    resolved_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    resolved_by_name = serializers.SerializerMethodField()

    class Meta:
        model = Issue
        fields = [
            "id",
            "tenant_id",
            "unit_id",
            "unit_identifier",
            "category_id",
            "category_name",
            "title",
            "description",
            "status",
            "priority",
            "created_by_id",
            "created_by_name",
            "resolved_by_id",
            "resolved_by_name",
            "resolved_at",
            "resolution_note",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj) -> str:
        return _display_name(obj.created_by) or ""

    def get_resolved_by_name(self, obj):
        return _display_name(obj.resolved_by)


class IssueCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    unit_id = serializers.UUIDField(required=False, allow_null=True)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    priority = serializers.ChoiceField(choices=IssuePriority.choices, default=IssuePriority.MEDIUM)


class IssueUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    priority = serializers.ChoiceField(choices=IssuePriority.choices, required=False)
    status = serializers.ChoiceField(choices=IssueStatus.choices, required=False)
    resolution_note = serializers.CharField(required=False, allow_blank=True)
