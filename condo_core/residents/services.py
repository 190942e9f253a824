# condo_core/residents/services.py
from __future__ import annotations

import logging
from typing import Any, Iterable, Optional
from uuid import UUID

from django.db import IntegrityError, transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from condo_core.common.api.exceptions import ConflictError
from condo_core.residents.models import (
    HouseholdMember,
    Pet,
    Resident,
    ResidentContact,
    ResidentStatus,
    UnitEmployee,
    Vehicle,
)
from condo_core.residents.selectors import get_resident, get_resident_for_user
from condo_core.units.models import Unit

logger = logging.getLogger(__name__)

# URL segment / payload key -> sub-record model
SUB_RECORD_MODELS = {
    "contacts": ResidentContact,
    "members": HouseholdMember,
    "employees": UnitEmployee,
    "vehicles": Vehicle,
    "pets": Pet,
}

RESIDENT_UPDATABLE_FIELDS = (
    "unit_id",
    "type",
    "full_name",
    "email",
    "phone",
    "rg",
    "cpf",
    "move_in_date",
    "landlord_name",
    "landlord_phone",
    "landlord_email",
    "contract_file_url",
    "status",
)

OWN_RECORD_MSG = "You can only change your own resident record."


def _sub_record_model(kind: str):
    model = SUB_RECORD_MODELS.get(kind)
    if model is None:
        raise ValidationError(f"Unknown resident sub-record type '{kind}'.")
    return model


def _assert_owner(resident: Resident, restrict_to_user_id: Optional[int]) -> None:
    if restrict_to_user_id is not None and resident.user_id != restrict_to_user_id:
        raise PermissionDenied(OWN_RECORD_MSG)


def create_sub_records(resident: Resident, sub_records: dict[str, Iterable[dict[str, Any]]]) -> None:
    for kind, items in (sub_records or {}).items():
        model = _sub_record_model(kind)
        model.objects.bulk_create([model(resident=resident, **item) for item in items or []])


class ResidentService:
    @staticmethod
    @transaction.atomic
    def create_for_user(
        *,
        user_id: int,
        tenant_id: UUID,
        unit_id: UUID,
        type: str,
        full_name: str,
        data_consent: bool = True,
        sub_records: Optional[dict[str, list[dict]]] = None,
        **fields,
    ) -> Resident:
        if get_resident_for_user(user_id=user_id) is not None:
            raise ConflictError("User already has a resident record.")

        if not Unit.objects.filter(id=unit_id, tenant_id=tenant_id).exists():
            raise NotFound("Unit not found in this tenant.")

        try:
            resident = Resident.objects.create(
                tenant_id=tenant_id,
                unit_id=unit_id,
                user_id=user_id,
                type=type,
                full_name=full_name,
                status=ResidentStatus.ACTIVE,
                data_consent=data_consent,
                data_consent_at=timezone.now() if data_consent else None,
                **fields,
            )
        except IntegrityError:
            raise ConflictError("User already has a resident record.")

        create_sub_records(resident, sub_records or {})

        logger.info("Resident created: %s user=%s tenant=%s", resident.id, user_id, tenant_id)
        return get_resident(tenant_id=tenant_id, resident_id=resident.id)

    @staticmethod
    @transaction.atomic
    def update(
        *,
        tenant_id: UUID,
        resident_id: UUID,
        restrict_to_user_id: Optional[int] = None,
        **changes,
    ) -> Resident:
        resident = get_resident(tenant_id=tenant_id, resident_id=resident_id)
        _assert_owner(resident, restrict_to_user_id)

        unknown = set(changes) - set(RESIDENT_UPDATABLE_FIELDS)
        if unknown:
            raise ValidationError({k: "This field cannot be updated." for k in sorted(unknown)})

        new_unit_id = changes.get("unit_id")
        if new_unit_id and not Unit.objects.filter(id=new_unit_id, tenant_id=tenant_id).exists():
            raise NotFound("Unit not found in this tenant.")

        for k, v in changes.items():
            setattr(resident, k, v)
        resident.save()
        return get_resident(tenant_id=tenant_id, resident_id=resident_id)

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, resident_id: UUID) -> None:
        resident = get_resident(tenant_id=tenant_id, resident_id=resident_id)
        logger.info("Resident deleted: %s tenant=%s", resident.id, tenant_id)
        resident.delete()

    @staticmethod
    def activate(*, tenant_id: UUID, resident_id: UUID) -> Resident:
        return ResidentService.update(tenant_id=tenant_id, resident_id=resident_id, status=ResidentStatus.ACTIVE)

    @staticmethod
    def deactivate(*, tenant_id: UUID, resident_id: UUID) -> Resident:
        return ResidentService.update(tenant_id=tenant_id, resident_id=resident_id, status=ResidentStatus.INACTIVE)

    @staticmethod
    @transaction.atomic
    def add_sub_record(
        *,
        tenant_id: UUID,
        resident_id: UUID,
        kind: str,
        data: dict[str, Any],
        restrict_to_user_id: Optional[int] = None,
    ):
        model = _sub_record_model(kind)
        resident = get_resident(tenant_id=tenant_id, resident_id=resident_id)
        _assert_owner(resident, restrict_to_user_id)
        return model.objects.create(resident=resident, **data)

    @staticmethod
    @transaction.atomic
    def remove_sub_record(
        *,
        tenant_id: UUID,
        resident_id: UUID,
        kind: str,
        record_id: UUID,
        restrict_to_user_id: Optional[int] = None,
    ) -> None:
        model = _sub_record_model(kind)
        resident = get_resident(tenant_id=tenant_id, resident_id=resident_id)
        _assert_owner(resident, restrict_to_user_id)

        deleted, _ = model.objects.filter(id=record_id, resident=resident).delete()
        if not deleted:
            raise NotFound("Record not found for this resident.")
