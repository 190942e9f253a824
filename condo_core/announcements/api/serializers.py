# condo_core/announcements/api/serializers.py
from __future__ import annotations

from rest_framework import serializers

from condo_core.announcements.models import Announcement, AnnouncementType


class AnnouncementSerializer(serializers.ModelSerializer):
    assembly_id = serializers.UUIDField(read_only=True, allow_null=True)
    created_by_id = serializers.IntegerField(read_only=True, allow_null=True)
    created_by_name = serializers.SerializerMethodField()
    view_count = serializers.IntegerField(read_only=True, default=0)
    like_count = serializers.IntegerField(read_only=True, default=0)
    liked_by_me = serializers.BooleanField(read_only=True, default=False)

    class Meta:
        model = Announcement
        fields = [
            "id",
            "tenant_id",
            "title",
            "content",
            "type",
            "assembly_id",
            "published",
            "created_by_id",
            "created_by_name",
            "view_count",
            "like_count",
            "liked_by_me",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_created_by_name(self, obj):
        user = obj.created_by
        if user is None:
            return None
        return user.get_full_name() or user.get_username()


class AnnouncementCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    content = serializers.CharField()
    type = serializers.ChoiceField(choices=AnnouncementType.choices, default=AnnouncementType.GENERAL)
    published = serializers.BooleanField(default=True)


class AnnouncementUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    content = serializers.CharField(required=False)
    type = serializers.ChoiceField(choices=AnnouncementType.choices, required=False)
    published = serializers.BooleanField(required=False)


class LikeToggleSerializer(serializers.Serializer):
    liked = serializers.BooleanField()
