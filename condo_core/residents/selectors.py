# condo_core/residents/selectors.py
from __future__ import annotations

from typing import Optional

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from condo_core.residents.models import Resident, ResidentInvite

RESIDENT_PREFETCH = ("emergency_contacts", "household_members", "employees", "vehicles", "pets")


def resident_qs(*, tenant_id) -> QuerySet[Resident]:
    return (
        Resident.objects.filter(tenant_id=tenant_id)
        .select_related("unit")
        .prefetch_related(*RESIDENT_PREFETCH)
    )


def list_residents(*, tenant_id, search: str = "", status: Optional[str] = None) -> QuerySet[Resident]:
    qs = resident_qs(tenant_id=tenant_id)
    if search:
        qs = qs.filter(full_name__icontains=search)
    if status:
        qs = qs.filter(status=status)
    return qs.order_by("full_name")


def list_residents_by_unit(*, tenant_id, unit_id) -> QuerySet[Resident]:
    return resident_qs(tenant_id=tenant_id).filter(unit_id=unit_id).order_by("full_name")


def get_resident(*, tenant_id, resident_id) -> Resident:
    obj = resident_qs(tenant_id=tenant_id).filter(id=resident_id).first()
    if obj is None:
        raise NotFound(f"Resident {resident_id} not found.")
    return obj


def get_resident_for_user(*, user_id) -> Optional[Resident]:
    return (
        Resident.objects.select_related("unit", "tenant")
        .prefetch_related(*RESIDENT_PREFETCH)
        .filter(user_id=user_id)
        .first()
    )


def list_invites(*, tenant_id) -> QuerySet[ResidentInvite]:
    return ResidentInvite.objects.filter(tenant_id=tenant_id).select_related("unit").order_by("-created_at")


def get_invite(*, tenant_id, invite_id) -> ResidentInvite:
    obj = ResidentInvite.objects.select_related("unit", "tenant").filter(tenant_id=tenant_id, id=invite_id).first()
    if obj is None:
        raise NotFound("Invite not found.")
    return obj


def find_invite_by_token(*, token: str) -> Optional[ResidentInvite]:
    return ResidentInvite.objects.select_related("unit", "tenant").filter(token=token).first()
