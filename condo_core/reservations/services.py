# condo_core/reservations/services.py
from __future__ import annotations

import logging
from typing import Any, Optional
from uuid import UUID

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from condo_core.common.api.exceptions import ConflictError
from condo_core.iam.roles import is_staff_member
from condo_core.reservations.models import CommonArea, Reservation, ReservationStatus
from condo_core.reservations.selectors import area_is_taken, get_area, get_reservation

logger = logging.getLogger(__name__)

AREA_FIELDS = ("name", "description", "rules", "max_capacity", "active")


class CommonAreaService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        name: str,
        description: Optional[str] = None,
        rules: Optional[str] = None,
        max_capacity: Optional[int] = None,
    ) -> CommonArea:
        area = CommonArea.objects.create(
            tenant_id=tenant_id,
            name=name,
            description=description or None,
            rules=rules or None,
            max_capacity=max_capacity or None,
        )
        logger.info("Common area created: %s tenant=%s", area.id, tenant_id)
        return area

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, area_id: UUID, **fields: Any) -> CommonArea:
        area = get_area(tenant_id=tenant_id, area_id=area_id)
        for name in AREA_FIELDS:
            if name in fields:
                setattr(area, name, fields[name])
        area.save()
        return area

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, area_id: UUID) -> None:
        area = get_area(tenant_id=tenant_id, area_id=area_id)
        logger.info("Common area deleted: %s tenant=%s", area.id, tenant_id)
        area.delete()


class ReservationService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        user,
        common_area_id: UUID,
        reservation_date,
        notes: Optional[str] = None,
    ) -> Reservation:
        area = CommonArea.objects.select_for_update().filter(tenant_id=tenant_id, id=common_area_id).first()
        if area is None:
            raise NotFound(f"Common area {common_area_id} not found.")
        if not area.active:
            raise ValidationError("This common area is not active.")

        if reservation_date < timezone.localdate():
            raise ValidationError({"reservation_date": ["The reservation date cannot be in the past."]})

        if area_is_taken(area_id=area.id, reservation_date=reservation_date):
            raise ConflictError("This area is already reserved for that date.")

        reservation = Reservation.objects.create(
            tenant_id=tenant_id,
            common_area=area,
            reserved_by=user,
            reservation_date=reservation_date,
            notes=notes or None,
        )
        logger.info("Reservation created: %s area=%s date=%s", reservation.id, area.id, reservation_date)
        return get_reservation(tenant_id=tenant_id, reservation_id=reservation.id)

    @staticmethod
    @transaction.atomic
    def update_status(
        *,
        tenant_id: UUID,
        reservation_id: UUID,
        user,
        status: str,
        rejection_reason: Optional[str] = None,
    ) -> Reservation:
        reservation = get_reservation(tenant_id=tenant_id, reservation_id=reservation_id)

        staff = is_staff_member(user)
        if status == ReservationStatus.CANCELLED:
            if not staff and reservation.reserved_by_id != user.id:
                raise PermissionDenied("You can only cancel your own reservations.")
        elif not staff:
            raise PermissionDenied("Only condominium staff can approve or reject reservations.")

        if status == ReservationStatus.REJECTED and not (rejection_reason or "").strip():
            raise ValidationError({"rejection_reason": ["A rejection reason is required."]})

        reservation.status = status
        if status == ReservationStatus.APPROVED:
            reservation.approved_by = user
            reservation.approved_at = timezone.now()
        elif status == ReservationStatus.REJECTED:
            reservation.rejection_reason = rejection_reason.strip()
        reservation.save()

        logger.info("Reservation %s -> %s by user=%s", reservation.id, status, user.id)
        return reservation

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, reservation_id: UUID) -> None:
        reservation = get_reservation(tenant_id=tenant_id, reservation_id=reservation_id)
        reservation.delete()
