# condo_core/reservations/admin.py
from django.contrib import admin

from condo_core.reservations.models import CommonArea, Reservation


@admin.register(CommonArea)
class CommonAreaAdmin(admin.ModelAdmin):
    list_display = ("name", "tenant", "max_capacity", "active", "created_at")
    list_filter = ("active", "tenant")
    search_fields = ("name",)


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ("common_area", "reservation_date", "reserved_by", "status", "approved_at")
    list_filter = ("status", "tenant")
    date_hierarchy = "reservation_date"
    ordering = ("-reservation_date",)
