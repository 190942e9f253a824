# condo_core/tenants/services.py
from __future__ import annotations

import logging
import re
from typing import Optional
from uuid import UUID

from django.db import transaction
from rest_framework.exceptions import ValidationError

from condo_core.common.api.exceptions import ConflictError
from condo_core.tenants.models import SLUG_PATTERN, Tenant
from condo_core.tenants.selectors import get_tenant, slug_taken

logger = logging.getLogger(__name__)

_UNSET = object()


def _clean_slug(slug: str) -> str:
    slug = (slug or "").strip()
    if not slug:
        raise ValidationError({"slug": "This field is required."})
    if not re.match(SLUG_PATTERN, slug):
        raise ValidationError({"slug": "Slug must contain only lowercase letters, digits and single hyphens."})
    return slug


class TenantService:
    """
    All Tenant mutations live here (write-model boundary).
    """

    @staticmethod
    @transaction.atomic
    def create(*, name: str, slug: str) -> Tenant:
        name = (name or "").strip()
        if not name:
            raise ValidationError({"name": "This field is required."})
        slug = _clean_slug(slug)

        if slug_taken(slug=slug):
            raise ConflictError(f"Slug '{slug}' is already in use.")

        t = Tenant.objects.create(name=name, slug=slug)
        logger.info("Tenant created: %s (%s)", t.id, t.slug)
        return t

    @staticmethod
    @transaction.atomic
    def update(*, tenant_id: UUID, name: Optional[str] = None, slug: Optional[str] = None) -> Tenant:
        get_tenant(tenant_id=tenant_id)
        t = Tenant.objects.select_for_update().get(id=tenant_id)

        update_fields: list[str] = []

        if name is not None:
            name = name.strip()
            if not name:
                raise ValidationError({"name": "This field may not be blank."})
            t.name = name
            update_fields.append("name")

        if slug is not None and slug != t.slug:
            slug = _clean_slug(slug)
            if slug_taken(slug=slug, exclude_id=t.id):
                raise ConflictError(f"Slug '{slug}' is already in use.")
            t.slug = slug
            update_fields.append("slug")

        if update_fields:
            update_fields.append("updated_at")
            t.save(update_fields=update_fields)
        return t

    @staticmethod
    @transaction.atomic
    def set_active(*, tenant_id: UUID, active: bool) -> Tenant:
        get_tenant(tenant_id=tenant_id)
        t = Tenant.objects.select_for_update().get(id=tenant_id)

        # idempotent no-op
        if t.active == active:
            return t

        t.active = active
        t.save(update_fields=["active", "updated_at"])
        logger.info("Tenant %s %s", t.id, "activated" if active else "deactivated")
        return t

    @staticmethod
    def activate(*, tenant_id: UUID) -> Tenant:
        return TenantService.set_active(tenant_id=tenant_id, active=True)

    @staticmethod
    def deactivate(*, tenant_id: UUID) -> Tenant:
        return TenantService.set_active(tenant_id=tenant_id, active=False)

    @staticmethod
    @transaction.atomic
    def delete(*, tenant_id: UUID) -> None:
        t = get_tenant(tenant_id=tenant_id)
        logger.info("Tenant deleted: %s (%s)", t.id, t.slug)
        t.delete()
