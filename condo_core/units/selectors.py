# condo_core/units/selectors.py
from __future__ import annotations

from typing import Any, Optional

from django.db.models import QuerySet
from rest_framework.exceptions import ValidationError

from condo_core.units.filters import UnitFilter
from condo_core.units.models import Unit


class UnitSelector:
    class NotFound(Exception):
        pass

    @staticmethod
    def get_unit(*, tenant_id, unit_id) -> Unit:
        try:
            return Unit.objects.get(id=unit_id, tenant_id=tenant_id)
        except (Unit.DoesNotExist, ValueError):
            raise UnitSelector.NotFound()

    @staticmethod
    def find_by_identifier(*, tenant_id, identifier: str) -> Optional[Unit]:
        return Unit.objects.filter(tenant_id=tenant_id, identifier=identifier).first()

    @staticmethod
    def list_units(*, tenant_id, params: Any = None) -> QuerySet[Unit]:
        """
        Query params: status, block, search.
        Ordered by block, number.
        """
        qs = Unit.objects.filter(tenant_id=tenant_id).order_by("block", "number")
        if not params:
            return qs

        f = UnitFilter(params, queryset=qs)
        if not f.is_valid():
            raise ValidationError(f.errors)
        return f.qs

    @staticmethod
    def count_by_tenant(*, tenant_id) -> int:
        return Unit.objects.filter(tenant_id=tenant_id).count()
