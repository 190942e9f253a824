# condo_core/reservations/selectors.py
from __future__ import annotations

import calendar
from datetime import date
from typing import Optional

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound, ValidationError

from condo_core.reservations.models import ACTIVE_RESERVATION_STATUSES, CommonArea, Reservation


def list_areas(*, tenant_id, include_inactive: bool = False) -> QuerySet[CommonArea]:
    qs = CommonArea.objects.filter(tenant_id=tenant_id)
    if not include_inactive:
        qs = qs.filter(active=True)
    return qs.order_by("name")


def get_area(*, tenant_id, area_id) -> CommonArea:
    obj = CommonArea.objects.filter(tenant_id=tenant_id, id=area_id).first()
    if obj is None:
        raise NotFound(f"Common area {area_id} not found.")
    return obj


def reservation_qs(*, tenant_id) -> QuerySet[Reservation]:
    return Reservation.objects.filter(tenant_id=tenant_id).select_related("common_area", "reserved_by", "approved_by")


def list_reservations(*, tenant_id, user_id=None) -> QuerySet[Reservation]:
    qs = reservation_qs(tenant_id=tenant_id)
    if user_id is not None:
        qs = qs.filter(reserved_by_id=user_id)
    return qs.order_by("-reservation_date")


def month_bounds(month: str) -> tuple[date, date]:
    """'YYYY-MM' -> (first day, last day)."""
    try:
        year, m = (int(p) for p in month.split("-"))
        last = calendar.monthrange(year, m)[1]
        return date(year, m, 1), date(year, m, last)
    except (ValueError, TypeError):
        raise ValidationError({"month": ["Expected format YYYY-MM."]})


def list_by_area(*, tenant_id, area_id, month: Optional[str] = None) -> QuerySet[Reservation]:
    qs = reservation_qs(tenant_id=tenant_id).filter(
        common_area_id=area_id,
        status__in=ACTIVE_RESERVATION_STATUSES,
    )
    if month:
        start, end = month_bounds(month)
        qs = qs.filter(reservation_date__range=(start, end))
    return qs.order_by("reservation_date")


def get_reservation(*, tenant_id, reservation_id) -> Reservation:
    obj = reservation_qs(tenant_id=tenant_id).filter(id=reservation_id).first()
    if obj is None:
        raise NotFound(f"Reservation {reservation_id} not found.")
    return obj


def area_is_taken(*, area_id, reservation_date) -> bool:
    return Reservation.objects.filter(
        common_area_id=area_id,
        reservation_date=reservation_date,
        status__in=ACTIVE_RESERVATION_STATUSES,
    ).exists()
