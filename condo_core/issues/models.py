# condo_core/issues/models.py
from django.conf import settings
from django.db import models

from condo_core.common.models import TenantScopedModel


class IssueStatus(models.TextChoices):
    OPEN = "OPEN", "Open"
    IN_PROGRESS = "IN_PROGRESS", "In progress"
    RESOLVED = "RESOLVED", "Resolved"
    CLOSED = "CLOSED", "Closed"


class IssuePriority(models.TextChoices):
    LOW = "LOW", "Low"
    MEDIUM = "MEDIUM", "Medium"
    HIGH = "HIGH", "High"


class IssueCategory(TenantScopedModel):
    name = models.CharField(max_length=100)
    active = models.BooleanField(default=True)

    class Meta:
        db_table = "issue_categories"
        verbose_name_plural = "issue categories"

    def __str__(self) -> str:
        return self.name


class Issue(TenantScopedModel):
    unit = models.ForeignKey(
        "units.Unit",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issues",
    )
    category = models.ForeignKey(
        IssueCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="issues",
    )

    title = models.CharField(max_length=255)
    description = models.TextField()
    status = models.CharField(max_length=16, choices=IssueStatus.choices, default=IssueStatus.OPEN, db_index=True)
    priority = models.CharField(max_length=8, choices=IssuePriority.choices, default=IssuePriority.MEDIUM)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="issues",
    )
    resolved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    resolution_note = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "issues"
        indexes = [
            models.Index(fields=["tenant", "status"]),
            models.Index(fields=["tenant", "created_by"]),
        ]

    def __str__(self) -> str:
        return self.title
