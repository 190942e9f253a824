# condo_core/reservations/models.py
from django.conf import settings
from django.db import models

from condo_core.common.models import TenantScopedModel


class ReservationStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    APPROVED = "APPROVED", "Approved"
    REJECTED = "REJECTED", "Rejected"
    CANCELLED = "CANCELLED", "Cancelled"


# statuses that hold the area for the day
ACTIVE_RESERVATION_STATUSES = (ReservationStatus.PENDING, ReservationStatus.APPROVED)


class CommonArea(TenantScopedModel):
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, null=True)
    rules = models.TextField(blank=True, null=True)
    max_capacity = models.PositiveIntegerField(null=True, blank=True)
    active = models.BooleanField(default=True)

    class Meta:
        db_table = "common_areas"
        indexes = [
            models.Index(fields=["tenant", "active"]),
        ]

    def __str__(self) -> str:
        return self.name


class Reservation(TenantScopedModel):
    common_area = models.ForeignKey(CommonArea, on_delete=models.CASCADE, related_name="reservations")
    reserved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reservations",
    )
    reservation_date = models.DateField(db_index=True)
    status = models.CharField(
        max_length=16,
        choices=ReservationStatus.choices,
        default=ReservationStatus.PENDING,
        db_index=True,
    )
    notes = models.TextField(blank=True, null=True)

    approved_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    approved_at = models.DateTimeField(null=True, blank=True)
    rejection_reason = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "reservations"
        indexes = [
            models.Index(fields=["common_area", "reservation_date"]),
        ]

    def __str__(self) -> str:
        return f"{self.common_area_id} @ {self.reservation_date}"
