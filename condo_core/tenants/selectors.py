# condo_core/tenants/selectors.py
from __future__ import annotations

from typing import Optional
from uuid import UUID

from django.db.models import QuerySet
from rest_framework.exceptions import NotFound

from condo_core.tenants.models import Tenant


def tenant_qs() -> QuerySet[Tenant]:
    return Tenant.objects.all()


def active_tenants_qs() -> QuerySet[Tenant]:
    return Tenant.objects.filter(active=True)


def get_tenant(*, tenant_id: UUID) -> Tenant:
    obj = Tenant.objects.filter(id=tenant_id).first()
    if obj is None:
        raise NotFound(f"Tenant {tenant_id} not found.")
    return obj


def get_tenant_or_none(*, tenant_id: UUID) -> Optional[Tenant]:
    return Tenant.objects.filter(id=tenant_id).first()


def get_tenant_by_slug(*, slug: str) -> Tenant:
    obj = Tenant.objects.filter(slug=slug).first()
    if obj is None:
        raise NotFound(f"Tenant with slug '{slug}' not found.")
    return obj


def slug_taken(*, slug: str, exclude_id: Optional[UUID] = None) -> bool:
    qs = Tenant.objects.filter(slug=slug)
    if exclude_id is not None:
        qs = qs.exclude(id=exclude_id)
    return qs.exists()
