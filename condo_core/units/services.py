# condo_core/units/services.py
from __future__ import annotations

import logging
from typing import Optional
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import NotFound

from condo_core.common.api.exceptions import ConflictError
from condo_core.subscriptions.services import check_unit_limit
from condo_core.units.models import Unit, UnitStatus
from condo_core.units.selectors import UnitSelector

logger = logging.getLogger(__name__)


def _get_locked(*, tenant_id: UUID, unit_id: UUID) -> Unit:
    try:
        UnitSelector.get_unit(tenant_id=tenant_id, unit_id=unit_id)
    except UnitSelector.NotFound:
        raise NotFound(f"Unit {unit_id} not found.")
    return Unit.objects.select_for_update().get(id=unit_id, tenant_id=tenant_id)


def _ensure_identifier_free(*, tenant_id: UUID, identifier: str) -> None:
    if UnitSelector.find_by_identifier(tenant_id=tenant_id, identifier=identifier) is not None:
        raise ConflictError(f'Unit "{identifier}" already exists in this condominium.')


class UnitService:
    @staticmethod
    @transaction.atomic
    def create(
        *,
        tenant_id: UUID,
        block: str,
        number: str,
        identifier: Optional[str] = None,
    ) -> Unit:
        check_unit_limit(tenant_id=tenant_id)

        identifier = identifier or f"{block}-{number}"
        _ensure_identifier_free(tenant_id=tenant_id, identifier=identifier)

        unit = Unit.objects.create(tenant_id=tenant_id, block=block, number=number, identifier=identifier)
        logger.info("Unit created: %s (%s) tenant=%s", unit.id, unit.identifier, tenant_id)
        return unit

    @staticmethod
    @transaction.atomic
    def update(
        *,
        tenant_id: UUID,
        unit_id: UUID,
        block: Optional[str] = None,
        number: Optional[str] = None,
        identifier: Optional[str] = None,
        status: Optional[str] = None,
    ) -> Unit:
        unit = _get_locked(tenant_id=tenant_id, unit_id=unit_id)

        if identifier and identifier != unit.identifier:
            _ensure_identifier_free(tenant_id=tenant_id, identifier=identifier)
        elif (block or number) and not identifier:
            # block/number changed without an explicit identifier: recompute it
            recomputed = f"{block or unit.block}-{number or unit.number}"
            if recomputed != unit.identifier:
                _ensure_identifier_free(tenant_id=tenant_id, identifier=recomputed)
                identifier = recomputed

        if block:
            unit.block = block
        if number:
            unit.number = number
        if identifier:
            unit.identifier = identifier
        if status:
            unit.status = status

        unit.save()
        return unit

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID, unit_id: UUID) -> None:
        unit = _get_locked(tenant_id=tenant_id, unit_id=unit_id)
        logger.info("Unit deleted: %s (%s) tenant=%s", unit.id, unit.identifier, tenant_id)
        unit.delete()

    @staticmethod
    def activate(*, tenant_id: UUID, unit_id: UUID) -> Unit:
        return UnitService.update(tenant_id=tenant_id, unit_id=unit_id, status=UnitStatus.ACTIVE)

    @staticmethod
    def deactivate(*, tenant_id: UUID, unit_id: UUID) -> Unit:
        return UnitService.update(tenant_id=tenant_id, unit_id=unit_id, status=UnitStatus.INACTIVE)
