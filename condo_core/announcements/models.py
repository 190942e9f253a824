# condo_core/announcements/models.py
from django.conf import settings
from django.db import models

from condo_core.common.models import TenantScopedModel


class AnnouncementType(models.TextChoices):
    GENERAL = "GENERAL", "General"
    ASSEMBLY = "ASSEMBLY", "Assembly"
    MAINTENANCE = "MAINTENANCE", "Maintenance"
    URGENT = "URGENT", "Urgent"


class Announcement(TenantScopedModel):
    title = models.CharField(max_length=255)
    content = models.TextField()
    type = models.CharField(max_length=16, choices=AnnouncementType.choices, default=AnnouncementType.GENERAL)
    assembly = models.ForeignKey(
        "assemblies.Assembly",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="announcements",
    )
    published = models.BooleanField(default=True, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="announcements",
    )

    class Meta:
        db_table = "announcements"

    def __str__(self) -> str:
        return self.title


class AnnouncementView(models.Model):
    announcement = models.ForeignKey(Announcement, on_delete=models.CASCADE, related_name="views")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+")
    viewed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "announcement_views"
        constraints = [
            models.UniqueConstraint(fields=["announcement", "user"], name="uniq_announcement_view_per_user"),
        ]


class AnnouncementLike(models.Model):
    announcement = models.ForeignKey(Announcement, on_delete=models.CASCADE, related_name="likes")
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="+")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "announcement_likes"
        constraints = [
            models.UniqueConstraint(fields=["announcement", "user"], name="uniq_announcement_like_per_user"),
        ]
