# condo_core/iam/admin.py
from __future__ import annotations

from django.contrib import admin

from condo_core.iam.models import UserProfile, UserTenant


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "name", "role", "tenant", "created_at", "updated_at")
    list_filter = ("role", "tenant")
    search_fields = ("name", "user__username", "user__email", "external_id")
    ordering = ("-created_at",)


@admin.register(UserTenant)
class UserTenantAdmin(admin.ModelAdmin):
    list_display = ("user", "tenant", "created_at")
    list_filter = ("tenant",)
    search_fields = ("user__username", "user__email", "tenant__name", "tenant__slug")
