# condo_core/tenants/admin.py
from django.contrib import admin

from condo_core.tenants.models import Tenant


@admin.register(Tenant)
class TenantAdmin(admin.ModelAdmin):
    list_display = ("name", "slug", "active", "plan", "subscription_status", "max_units", "created_at")
    list_filter = ("active", "plan", "subscription_status")
    search_fields = ("name", "slug")
    ordering = ("-created_at",)
    readonly_fields = ("id", "created_at", "updated_at")

    fieldsets = (
        (None, {"fields": ("id", "name", "slug", "active")}),
        (
            "Subscription",
            {
                "fields": (
                    "plan",
                    "subscription_status",
                    "max_units",
                    "billing_customer_id",
                    "billing_subscription_id",
                    "trial_ends_at",
                    "current_period_end",
                )
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at")}),
    )
