# condo_core/announcements/admin.py
from django.contrib import admin

from condo_core.announcements.models import Announcement


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("title", "tenant", "type", "published", "created_by", "created_at")
    list_filter = ("type", "published", "tenant")
    search_fields = ("title", "content")
