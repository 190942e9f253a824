# condo_core/units/admin.py
from django.contrib import admin

from condo_core.units.models import Unit


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ("identifier", "block", "number", "status", "tenant", "created_at")
    list_filter = ("status", "tenant")
    search_fields = ("identifier", "block", "number")
    ordering = ("tenant", "block", "number")
