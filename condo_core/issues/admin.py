# condo_core/issues/admin.py
from django.contrib import admin

from condo_core.issues.models import Issue, IssueCategory


@admin.register(IssueCategory)
class IssueCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "tenant", "active")
    list_filter = ("active", "tenant")


@admin.register(Issue)
class IssueAdmin(admin.ModelAdmin):
    list_display = ("title", "tenant", "status", "priority", "category", "unit", "created_at")
    list_filter = ("status", "priority", "tenant")
    search_fields = ("title", "description")
    readonly_fields = ("resolved_by", "resolved_at", "created_at", "updated_at")
